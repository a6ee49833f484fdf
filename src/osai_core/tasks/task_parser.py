# src/osai_core/tasks/task_parser.py

"""
Task input parser.

Input shape: "YYYY-MM-DD:HH:MM:Task Name". The name may itself contain ':'
(everything after the third delimiter belongs to it).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..core.errors import ParseError
from .task_models import Task

EXPECTED_FORMAT = "YYYY-MM-DD:HH:MM:Task Name"

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_CLOCK_RE = re.compile(r"\d{1,2}")


@dataclass(slots=True, frozen=True)
class TaskTokens:
    date: str
    hour: str
    minute: str
    name: str


def tokenize(raw: str) -> TaskTokens:
    """Split raw input into (date, hour, minute, name); validates arity only."""
    parts = (raw or "").strip().split(":")
    if len(parts) < 4:
        raise ParseError(f"Invalid argument format. Use {EXPECTED_FORMAT}.")
    date, hour, minute, *rest = parts
    return TaskTokens(
        date=date.strip(),
        hour=hour.strip(),
        minute=minute.strip(),
        name=":".join(rest).strip(),
    )


def _validate_fields(tokens: TaskTokens) -> None:
    if not _DATE_RE.fullmatch(tokens.date):
        raise ParseError(
            f"Invalid date {tokens.date!r}: expected YYYY-MM-DD (format {EXPECTED_FORMAT}).",
            field="date",
        )
    if not _CLOCK_RE.fullmatch(tokens.hour):
        raise ParseError(
            f"Invalid hour {tokens.hour!r}: expected HH (format {EXPECTED_FORMAT}).",
            field="hour",
        )
    if not _CLOCK_RE.fullmatch(tokens.minute):
        raise ParseError(
            f"Invalid minute {tokens.minute!r}: expected MM (format {EXPECTED_FORMAT}).",
            field="minute",
        )
    if not tokens.name:
        raise ParseError(f"Task name is empty. Use {EXPECTED_FORMAT}.", field="name")


def parse_task(raw: str) -> Task:
    """
    Parse user input into a new (not yet notified) Task.

    Seconds are implicitly zero. Impossible dates like 2025-02-30 or 24:00
    are rejected.
    """
    tokens = tokenize(raw)
    _validate_fields(tokens)

    candidate = f"{tokens.date}:{tokens.hour}:{tokens.minute}:00"
    try:
        when = datetime.strptime(candidate, "%Y-%m-%d:%H:%M:%S")
    except ValueError as e:
        raise ParseError(
            "Invalid date/time. Ensure date is YYYY-MM-DD and time is HH:MM "
            f"(format {EXPECTED_FORMAT})."
        ) from e

    return Task(when=when, name=tokens.name, notified=False)
