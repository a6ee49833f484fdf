# src/osai_core/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one event loop:
- the task scheduler as a background asyncio task,
- the console command loop in the foreground.

Leaving the console cancels the scheduler; an in-flight reminder is not
rolled back.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import run_task_scheduler

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    settings = state.settings

    initial = state.task_store.load()
    logger.info("Loaded %d tasks.", len(initial))

    scheduler = asyncio.create_task(
        run_task_scheduler(
            state.task_store,
            state.renderer,
            state.playback,
            interval_seconds=settings.poll_interval_seconds,
            lead_minutes=settings.notification_lead_minutes,
            time_label_format=settings.time_label_format,
        ),
        name="task-scheduler",
    )
    print("\nOSAI-Core Task Manager is RUNNING.")

    try:
        await run_console_loop(state)
    finally:
        scheduler.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler
        await state.notifier.aclose()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "osai"))

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
