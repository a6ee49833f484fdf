# src/osai_core/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/notifier/renderer/playback).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..llm.client import GeminiClient
from ..lyrics.renderer import LyricRenderer
from ..playback.player import CommandPlayback
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.lyric_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    A missing Gemini key is not an error here: reminders fall back to the
    template text and the `ai` command reports it.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notifier = GeminiClient(settings)
    if not getattr(settings, "gemini_api_key", None):
        logger.warning("GEMINI_API_KEY is not set; reminders will use the fallback text.")

    renderer = LyricRenderer(
        notifier,
        settings.lyric_path,
        emotion_params=settings.emotion_params,
        lead_minutes=settings.notification_lead_minutes,
    )

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_path),
        notifier=notifier,
        renderer=renderer,
        playback=CommandPlayback(settings.synth_command, settings.play_command),
    )
