# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from osai_core.core.errors import StoreError
from osai_core.lyrics.renderer import LyricRenderer
from osai_core.tasks.task_models import Task
from osai_core.tasks.task_scheduler import is_in_window, run_poll_cycle, run_task_scheduler
from osai_core.tasks.task_store import TaskStore

from .fakes import FakeNotifier, FakePlayback, exhausted_error

LEAD = timedelta(minutes=5)
WHEN = datetime(2025, 11, 19, 8, 0)


class CountingStore(TaskStore):
    """Real JSON store that counts writes (and can be told to fail them)."""

    def __init__(self, path: Path, *, fail_save: bool = False) -> None:
        super().__init__(path)
        self.saves = 0
        self.fail_save = fail_save

    def save(self, tasks: Sequence[Task]) -> None:
        self.saves += 1
        if self.fail_save:
            raise StoreError("disk full")
        super().save(tasks)


def _seed(path: Path, *tasks: Task) -> CountingStore:
    TaskStore(path).save(list(tasks))
    return CountingStore(path)


@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (datetime(2025, 11, 19, 7, 54, 59), False),
        (datetime(2025, 11, 19, 7, 55, 0), True),
        (datetime(2025, 11, 19, 7, 59, 59), True),
        (datetime(2025, 11, 19, 8, 0, 0), False),
        (datetime(2025, 11, 19, 9, 0, 0), False),
    ],
)
def test_window_bounds(now: datetime, expected: bool) -> None:
    assert is_in_window(Task(when=WHEN, name="wake"), now, LEAD) is expected


def test_notified_task_is_never_in_window() -> None:
    task = Task(when=WHEN, name="wake", notified=True)
    assert is_in_window(task, datetime(2025, 11, 19, 7, 57), LEAD) is False


@pytest.mark.asyncio
async def test_end_to_end_cycle_marks_notified(tmp_path: Path, playback: FakePlayback) -> None:
    now = datetime(2025, 11, 19, 7, 57)
    store = _seed(tmp_path / "tasks.json", Task(when=now + timedelta(minutes=3), name="Stand-up"))
    notifier = FakeNotifier(error=exhausted_error())
    renderer = LyricRenderer(notifier, tmp_path / "lyric.txt", lead_minutes=5)

    fired = await run_poll_cycle(store, renderer, playback, now=now, lead=LEAD, time_label_format="%H:%M")

    assert fired == 1
    line = (tmp_path / "lyric.txt").read_text("utf-8")
    text, *params = line.split(",")
    assert "Stand-up" in text and "08:00" in text
    assert params == ["5"] * 14
    assert playback.played == [line]

    reloaded = TaskStore(tmp_path / "tasks.json").load()
    assert reloaded[0].notified is True
    assert store.saves == 1


@pytest.mark.asyncio
async def test_second_cycle_does_not_fire_again(tmp_path: Path, playback: FakePlayback) -> None:
    now = datetime(2025, 11, 19, 7, 56)
    store = _seed(tmp_path / "tasks.json", Task(when=WHEN, name="wake"))
    notifier = FakeNotifier(next_text="起きて")
    renderer = LyricRenderer(notifier, tmp_path / "lyric.txt")

    assert await run_poll_cycle(store, renderer, playback, now=now, lead=LEAD) == 1
    assert await run_poll_cycle(store, renderer, playback, now=now + timedelta(seconds=5), lead=LEAD) == 0

    assert len(notifier.calls) == 1
    assert len(playback.played) == 1
    assert store.saves == 1


@pytest.mark.asyncio
async def test_late_task_is_skipped_forever(tmp_path: Path, playback: FakePlayback) -> None:
    store = _seed(tmp_path / "tasks.json", Task(when=WHEN, name="missed"))
    notifier = FakeNotifier()
    renderer = LyricRenderer(notifier, tmp_path / "lyric.txt")

    for now in (WHEN, WHEN + timedelta(minutes=1), WHEN + timedelta(days=1)):
        assert await run_poll_cycle(store, renderer, playback, now=now, lead=LEAD) == 0

    assert notifier.calls == []
    assert playback.played == []
    assert store.saves == 0
    assert store.load()[0].notified is False


@pytest.mark.asyncio
async def test_noop_cycle_does_not_rewrite_file(tmp_path: Path, playback: FakePlayback) -> None:
    path = tmp_path / "tasks.json"
    store = _seed(path, Task(when=WHEN, name="later"), Task(when=WHEN, name="done", notified=True))
    before = path.read_bytes()
    renderer = LyricRenderer(FakeNotifier(), tmp_path / "lyric.txt")

    await run_poll_cycle(store, renderer, playback, now=WHEN - timedelta(hours=1), lead=LEAD)

    assert store.saves == 0
    assert path.read_bytes() == before


@pytest.mark.asyncio
async def test_playback_failure_leaves_task_eligible(tmp_path: Path) -> None:
    store = _seed(tmp_path / "tasks.json", Task(when=WHEN, name="wake"))
    renderer = LyricRenderer(FakeNotifier(), tmp_path / "lyric.txt")
    broken = FakePlayback(fail=True)

    now = datetime(2025, 11, 19, 7, 58)
    assert await run_poll_cycle(store, renderer, broken, now=now, lead=LEAD) == 0
    assert store.load()[0].notified is False
    assert store.saves == 0

    working = FakePlayback()
    assert await run_poll_cycle(store, renderer, working, now=now + timedelta(seconds=5), lead=LEAD) == 1
    assert store.load()[0].notified is True


@pytest.mark.asyncio
async def test_render_failure_is_isolated_per_task(tmp_path: Path, playback: FakePlayback) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", "utf-8")
    store = _seed(
        tmp_path / "tasks.json",
        Task(when=WHEN, name="first"),
        Task(when=WHEN + timedelta(minutes=1), name="second"),
    )
    renderer = LyricRenderer(FakeNotifier(), blocker / "lyric.txt")

    fired = await run_poll_cycle(store, renderer, playback, now=datetime(2025, 11, 19, 7, 58), lead=LEAD)

    assert fired == 0
    assert playback.played == []
    assert [t.notified for t in store.load()] == [False, False]


@pytest.mark.asyncio
async def test_save_failure_is_logged_not_raised(tmp_path: Path, playback: FakePlayback) -> None:
    path = tmp_path / "tasks.json"
    TaskStore(path).save([Task(when=WHEN, name="wake")])
    store = CountingStore(path, fail_save=True)
    renderer = LyricRenderer(FakeNotifier(), tmp_path / "lyric.txt")

    fired = await run_poll_cycle(store, renderer, playback, now=datetime(2025, 11, 19, 7, 58), lead=LEAD)

    assert fired == 1
    assert store.saves == 1


@pytest.mark.asyncio
async def test_scheduler_loop_picks_up_appended_tasks(tmp_path: Path, playback: FakePlayback) -> None:
    now = datetime(2025, 11, 19, 7, 58)
    path = tmp_path / "tasks.json"
    store = TaskStore(path)
    renderer = LyricRenderer(FakeNotifier(next_text="hi"), tmp_path / "lyric.txt")

    runner = asyncio.create_task(
        run_task_scheduler(
            store,
            renderer,
            playback,
            interval_seconds=0.01,
            lead_minutes=5,
            now_fn=lambda: now,
        )
    )

    await asyncio.sleep(0.03)
    # Another writer (the console) appends while the scheduler is running.
    TaskStore(path).append(Task(when=WHEN, name="appended"))
    await asyncio.sleep(0.05)

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(playback.played) == 1
    assert TaskStore(path).load()[0].notified is True


class FlakyStore(TaskStore):
    """Store whose first load() blows up with an unexpected error."""

    def __init__(self, path: Path) -> None:
        super().__init__(path)
        self.loads = 0

    def load(self) -> list[Task]:
        self.loads += 1
        if self.loads == 1:
            raise RuntimeError("disk hiccup")
        return super().load()


@pytest.mark.asyncio
async def test_scheduler_loop_survives_failed_cycle(tmp_path: Path, playback: FakePlayback, caplog) -> None:
    now = datetime(2025, 11, 19, 7, 58)
    path = tmp_path / "tasks.json"
    TaskStore(path).save([Task(when=WHEN, name="wake")])
    store = FlakyStore(path)
    renderer = LyricRenderer(FakeNotifier(next_text="hi"), tmp_path / "lyric.txt")

    runner = asyncio.create_task(
        run_task_scheduler(
            store,
            renderer,
            playback,
            interval_seconds=0.01,
            now_fn=lambda: now,
        )
    )

    await asyncio.sleep(0.05)
    assert not runner.done()

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert store.loads >= 2
    assert len(playback.played) == 1
    assert TaskStore(path).load()[0].notified is True
    assert any("Poll cycle failed" in r.getMessage() for r in caplog.records)
