# src/osai_core/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and commands depend on Protocols instead of concrete
implementations, so the HTTP client, playback and storage can be swapped
for fakes in tests.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

Sleeper = Callable[[float], Awaitable[Any]]


class TextGenerator(Protocol):
    """Single-shot text completion (Gemini-compatible)."""

    async def complete(self, query: str) -> str: ...


class Renderer(Protocol):
    """Builds the spoken text for a task and writes it to the handoff file."""

    @property
    def handoff_path(self) -> Path: ...

    async def render(self, task_name: str, trigger_time_label: str) -> Any: ...


class Playback(Protocol):
    """
    External synthesis + playback collaborator.

    Reads the handoff file, speaks it. Raises on failure.
    """

    async def render_and_play(self, handoff_path: Path) -> None: ...
    async def play(self, handoff_path: Path) -> None: ...


class TaskRepo(Protocol):
    def load(self) -> list[Any]: ...
    def save(self, tasks: Sequence[Any]) -> None: ...
    def append(self, task: Any) -> list[Any]: ...
