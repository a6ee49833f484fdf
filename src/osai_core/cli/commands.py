# src/osai_core/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.errors import NotifierError, OsaiError, ParseError
from ..core.state import AppState
from ..llm.client import friendly_notifier_error_message
from ..tasks.task_api import add_task, list_tasks
from ..tasks.task_models import format_when
from ..tasks.task_parser import EXPECTED_FORMAT

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, str], CommandResult]
CommandHandler3 = Callable[[AppState, str, CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

AI_QUERY_SUFFIX = "ひらがなで返して"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple command registry used by the console (help, task, show_tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "command args" (a leading "/" is accepted).
        Returns a reply string or None for empty input.

        Everything after the command name is passed through untouched, since
        task names may contain spaces and colons.
        """
        line = line.strip().removeprefix("/")
        if not line:
            return None

        name, _, arg = line.partition(" ")
        name = name.lower()
        arg = arg.strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Use help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, arg, emit)
        else:
            result = cast(CommandHandler2, handler)(state, arg)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        lines.append("  exit | quit - Stop the application.")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, arg: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, arg: str) -> str:
    s = state.settings
    ai = "configured" if getattr(s, "gemini_api_key", None) else "NOT configured (fallback text only)"
    return (
        "Status:\n"
        f"  Tasks file: {state.task_store.path}\n"
        f"  Handoff file: {state.renderer.handoff_path}\n"
        f"  AI ({getattr(s, 'gemini_model', '?')}): {ai}\n"
        f"  Poll interval: {getattr(s, 'poll_interval_seconds', '?')}s, "
        f"lead: {getattr(s, 'notification_lead_minutes', '?')} min\n"
        f"  Synth command: {state.playback.synth_command or '-'}\n"
        f"  Play command: {state.playback.play_command or '-'}"
    )


def cmd_task(state: AppState, arg: str) -> str:
    """task YYYY-MM-DD:HH:MM:Task Name"""
    if not arg:
        return f"Usage: task {EXPECTED_FORMAT}"
    try:
        task = add_task(state.task_store, arg)
    except ParseError as e:
        return f"Error: {e}"
    except OsaiError as e:
        logger.exception("Failed to add task")
        return f"Error: {e}"
    return f"Task added and saved: {format_when(task.when)}:{task.name}"


def cmd_show_tasks(state: AppState, arg: str) -> str:
    return list_tasks(state.task_store)


async def _speak(state: AppState, text: str) -> str | None:
    """Write text to the handoff file and play it. Returns an error string or None."""
    try:
        state.renderer.write_handoff(text)
        await state.playback.render_and_play(state.renderer.handoff_path)
    except OsaiError as e:
        logger.warning("Speak failed: %s", e)
        return f"Error: {e}"
    return None


async def cmd_ai(state: AppState, arg: str, emit: CommandEmitter | None = None) -> str:
    """ai <query>: ask the AI and speak the answer."""
    if not arg:
        return "Error: 'ai' command requires a query."

    if emit:
        emit("[AI] Thinking...")

    try:
        text = await state.notifier.complete(arg + AI_QUERY_SUFFIX)
    except NotifierError as e:
        return f"Error: {friendly_notifier_error_message(e)}"

    err = await _speak(state, text)
    if err:
        return f"AI Response (Text):\n{text}\n{err}"
    return f"AI Response (Text):\n{text}\n[Vocalization complete. Playing audio...]"


async def cmd_speak(state: AppState, arg: str) -> str:
    """speak <text>: speak custom text."""
    if not arg:
        return "Usage: speak <text>"
    err = await _speak(state, arg)
    return err or f"Vocalization complete for: '{arg}'"


async def cmd_play(state: AppState, arg: str) -> str:
    try:
        await state.playback.play(state.renderer.handoff_path)
    except OsaiError as e:
        logger.warning("Play failed: %s", e)
        return f"Error: {e}"
    return "Playing audio..."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current settings (files/AI/playback).")
registry.register(
    "task",
    cmd_task,
    help_text=f"Add a new task: task {EXPECTED_FORMAT} (e.g. task 2025-12-25:08:30:Wake up call).",
)
registry.register("show_tasks", cmd_show_tasks, help_text="Display all scheduled tasks.", aliases=["tasks"])
registry.register("play", cmd_play, help_text="Play the last synthesized audio again.")
registry.register("ai", cmd_ai, help_text="Ask the AI a question and get a vocal response.")
registry.register("speak", cmd_speak, help_text="Speak custom text.", aliases=["vocaloid"])
