# src/osai_core/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

WHEN_FORMAT = "%Y-%m-%d:%H:%M"


def format_when(when: datetime) -> str:
    """Canonical on-disk form: YYYY-MM-DD:HH:MM."""
    return when.strftime(WHEN_FORMAT)


def parse_when(raw: str) -> datetime:
    return datetime.strptime(raw, WHEN_FORMAT)


@dataclass(slots=True)
class Task:
    """
    One scheduled notification.

    `when` is naive local wall-clock time with minute precision.
    `notified` only ever goes False -> True.
    """

    when: datetime
    name: str
    notified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "when": format_when(self.when),
            "name": self.name,
            "notified": self.notified,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record.

        Raises ValueError/TypeError/KeyError on invalid records.
        Older task files used "datetime" instead of "when".
        """
        raw_when = data["when"] if "when" in data else data["datetime"]
        if not isinstance(raw_when, str):
            raise TypeError(f"task 'when' must be a string, got {type(raw_when).__name__}")
        name = data["name"]
        if not isinstance(name, str):
            raise TypeError(f"task 'name' must be a string, got {type(name).__name__}")
        notified = data.get("notified", False)
        if not isinstance(notified, bool):
            raise TypeError(f"task 'notified' must be a bool, got {type(notified).__name__}")
        return cls(when=parse_when(raw_when), name=name, notified=notified)
