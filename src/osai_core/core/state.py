# src/osai_core/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..llm.client import GeminiClient
from ..lyrics.renderer import LyricRenderer
from ..playback.player import CommandPlayback
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything the console and the scheduler need, wired once at startup.

    The scheduler and the console share only the TaskStore *file*; the
    scheduler keeps no task list between cycles.
    """

    settings: Any
    task_store: TaskStore
    notifier: GeminiClient
    renderer: LyricRenderer
    playback: CommandPlayback
