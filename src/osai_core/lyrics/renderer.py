# src/osai_core/lyrics/renderer.py

"""
Lyric renderer.

Turns a due task into one handoff line for the voice synthesis engine:

    "<text>,<p1>,<p2>,...,<p14>"

The text comes from the text generator when it is reachable, otherwise from a
fixed template. The handoff file is a single slot: each render overwrites it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import NotifierError, RenderError
from ..core.ports import TextGenerator

logger = logging.getLogger(__name__)

EMOTION_PARAM_COUNT = 14


def parse_emotion_params(raw: str) -> tuple[int, ...]:
    """Parse "5,5,...". Exactly 14 integers in 0..255, else ValueError."""
    parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
    if len(parts) != EMOTION_PARAM_COUNT:
        raise ValueError(f"expected {EMOTION_PARAM_COUNT} emotion params, got {len(parts)}")
    values = tuple(int(p) for p in parts)
    for v in values:
        if not 0 <= v <= 255:
            raise ValueError(f"emotion param out of range 0..255: {v}")
    return values


def build_prompt(task_name: str, time_label: str, lead_minutes: int) -> str:
    return (
        f"タスク: {task_name} が{time_label}にあります。"
        f"このタスクの内容を要約し、実行{lead_minutes}分前であることを含めて、"
        "私に親切に教えてください。絵文字は使わない"
    )


def fallback_text(task_name: str, time_label: str, lead_minutes: int) -> str:
    """Deterministic message used when the generator is unavailable."""
    return f"{time_label}に{task_name}があります。{lead_minutes}分前です。"


@dataclass(slots=True, frozen=True)
class RenderedText:
    text: str
    line: str
    generated: bool
    path: Path


class LyricRenderer:
    def __init__(
        self,
        generator: TextGenerator,
        handoff_path: str | Path,
        *,
        emotion_params: str | tuple[int, ...] = (5,) * EMOTION_PARAM_COUNT,
        lead_minutes: int = 5,
    ) -> None:
        self._generator = generator
        self._path = Path(handoff_path)
        if isinstance(emotion_params, str):
            emotion_params = parse_emotion_params(emotion_params)
        elif len(emotion_params) != EMOTION_PARAM_COUNT:
            raise ValueError(f"expected {EMOTION_PARAM_COUNT} emotion params, got {len(emotion_params)}")
        self._params = tuple(int(p) for p in emotion_params)
        self._lead_minutes = int(lead_minutes)

    @property
    def handoff_path(self) -> Path:
        return self._path

    def format_line(self, text: str) -> str:
        return f"{text},{','.join(str(p) for p in self._params)}"

    def write_handoff(self, text: str) -> RenderedText:
        """Overwrite the handoff file with text + params. Raises RenderError."""
        line = self.format_line(text)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(line, "utf-8")
        except OSError as e:
            raise RenderError(f"Failed to write handoff file {self._path}: {e}") from e
        logger.debug("Handoff written: %d chars to %s", len(line), self._path)
        return RenderedText(text=text, line=line, generated=False, path=self._path)

    async def render(self, task_name: str, trigger_time_label: str) -> RenderedText:
        prompt = build_prompt(task_name, trigger_time_label, self._lead_minutes)

        generated = True
        try:
            text = await self._generator.complete(prompt)
        except NotifierError as e:
            logger.warning("Text generation failed (using fallback): %s", e)
            text = fallback_text(task_name, trigger_time_label, self._lead_minutes)
            generated = False

        rendered = self.write_handoff(text)
        return RenderedText(text=rendered.text, line=rendered.line, generated=generated, path=rendered.path)
