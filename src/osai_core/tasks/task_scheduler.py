# src/osai_core/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

A small polling loop that, every interval:
- reloads the full task list from the store (no in-memory carry-over),
- finds unnotified tasks inside their notification window [when - lead, when),
- renders the reminder text and hands it to playback,
- marks successful tasks notified and writes the list back once.

Tasks first seen after their `when` has passed are skipped for good.
Per-task failures are logged and the task stays eligible while its window
is still open. To stop the scheduler, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from ..core.errors import StoreError
from ..core.ports import Playback, Renderer, Sleeper, TaskRepo
from .task_models import Task, format_when

logger = logging.getLogger(__name__)

DEFAULT_LEAD = timedelta(minutes=5)
DEFAULT_TIME_LABEL_FORMAT = "%H時%M分"


def notification_window(task: Task, lead: timedelta = DEFAULT_LEAD) -> tuple[datetime, datetime]:
    return task.when - lead, task.when


def is_in_window(task: Task, now: datetime, lead: timedelta = DEFAULT_LEAD) -> bool:
    """True iff the task is unnotified and now is in [when - lead, when)."""
    if task.notified:
        return False
    start, end = notification_window(task, lead)
    return start <= now < end


async def notify_task(task: Task, renderer: Renderer, playback: Playback, *, time_label_format: str) -> bool:
    """Run the pipeline for one task. Returns True on success; never raises."""
    label = task.when.strftime(time_label_format)
    when_s = format_when(task.when)

    try:
        rendered = await renderer.render(task.name, label)
    except Exception:
        logger.exception("Task preparation failed (text/handoff) task=%s name=%r", when_s, task.name)
        return False

    try:
        await playback.render_and_play(renderer.handoff_path)
    except Exception:
        logger.exception("Playback failed task=%s name=%r", when_s, task.name)
        return False

    logger.info(
        "Task alert fired task=%s name=%r generated=%s",
        when_s,
        task.name,
        getattr(rendered, "generated", None),
    )
    return True


async def run_poll_cycle(
    task_store: TaskRepo,
    renderer: Renderer,
    playback: Playback,
    *,
    now: datetime,
    lead: timedelta = DEFAULT_LEAD,
    time_label_format: str = DEFAULT_TIME_LABEL_FORMAT,
) -> int:
    """
    One polling cycle. Returns how many tasks were marked notified.

    The store is only written when at least one flag flipped.
    """
    tasks = task_store.load()
    notified = 0

    for task in tasks:
        if not is_in_window(task, now, lead):
            continue

        if await notify_task(task, renderer, playback, time_label_format=time_label_format):
            task.notified = True
            notified += 1

    if notified:
        try:
            task_store.save(tasks)
        except StoreError:
            logger.exception("Failed to save tasks after notifying %d task(s)", notified)

    return notified


async def run_task_scheduler(
    task_store: TaskRepo,
    renderer: Renderer,
    playback: Playback,
    *,
    interval_seconds: float = 5.0,
    lead_minutes: float = 5,
    time_label_format: str = DEFAULT_TIME_LABEL_FORMAT,
    now_fn: Callable[[], datetime] = datetime.now,
    sleep: Sleeper = asyncio.sleep,
) -> None:
    """Poll forever; only cancellation stops it."""
    sleep_s = max(0.01, float(interval_seconds))
    lead = timedelta(minutes=float(lead_minutes))

    logger.info("Task scheduler started (interval=%.1fs, lead=%s)", sleep_s, lead)

    while True:
        try:
            await run_poll_cycle(
                task_store,
                renderer,
                playback,
                now=now_fn(),
                lead=lead,
                time_label_format=time_label_format,
            )
        except Exception:
            logger.exception("Poll cycle failed")

        await sleep(sleep_s)
