# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from osai_core.core.state import AppState
from osai_core.lyrics.renderer import LyricRenderer
from osai_core.tasks.task_store import TaskStore

from .fakes import FakeNotifier, FakePlayback


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        data_dir=tmp_path,
        tasks_path=tmp_path / "scheduled_tasks.json",
        lyric_path=tmp_path / "lyric.txt",
        gemini_api_key="test-key",
        gemini_base_url="https://gemini.test/v1beta",
        gemini_model="test-model",
        system_instruction="Be brief.",
        llm_connect_timeout_seconds=1.0,
        llm_read_timeout_seconds=1.0,
        llm_max_attempts=3,
        poll_interval_seconds=5.0,
        notification_lead_minutes=5,
        time_label_format="%H:%M",
        emotion_params="5,5,5,5,5,5,5,5,5,5,5,5,5,5",
        synth_command="",
        play_command="",
    )


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_path)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier(next_text="generated reminder")


@pytest.fixture()
def playback() -> FakePlayback:
    return FakePlayback()


@pytest.fixture()
def renderer(settings: SimpleNamespace, notifier: FakeNotifier) -> LyricRenderer:
    return LyricRenderer(
        notifier,
        settings.lyric_path,
        emotion_params=settings.emotion_params,
        lead_minutes=settings.notification_lead_minutes,
    )


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    task_store: TaskStore,
    notifier: FakeNotifier,
    renderer: LyricRenderer,
    playback: FakePlayback,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the TaskStore and renderer are real (tmp_path files) because their
    file behavior is part of what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=task_store,
        notifier=notifier,  # type: ignore[arg-type]
        renderer=renderer,
        playback=playback,  # type: ignore[arg-type]
    )
