# src/osai_core/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..core.errors import StoreError
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    JSON task store: one file holding the ordered task list.

    Consistency model:
    - every mutation is a full load -> modify -> save cycle
    - save replaces the whole file (temp file + os.replace), so readers
      never see a partial write
    - no locking: concurrent writers are last-writer-wins

    Records that can't be turned into a Task (e.g. a hand-edited date) are
    skipped by load() but kept verbatim and written back after the valid
    tasks on the next save(), so a bad row never wipes the rest of the file.
    """

    def __init__(self, path: str | Path = "scheduled_tasks.json") -> None:
        self._path = Path(path)
        self._invalid_records: list[Any] = []
        logger.info("TaskStore ready path=%s exists=%s", self._path, self._path.exists())

    @property
    def path(self) -> Path:
        return self._path

    @property
    def invalid_records(self) -> list[Any]:
        """Raw records skipped by the last load()."""
        return list(self._invalid_records)

    def load(self) -> list[Task]:
        """
        Read all tasks.

        Missing file -> [].
        Unreadable file, bad JSON or not an array -> WARNING + [] (never raises).
        Invalid single record -> WARNING, record skipped (and preserved on save).
        """
        self._invalid_records = []

        if not self._path.exists():
            return []

        try:
            raw = self._path.read_text("utf-8")
        except OSError as e:
            logger.warning("Failed to read task file %s (%s); starting with empty list.", self._path, e)
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Failed to parse tasks in %s (%s); starting with empty list.", self._path, e)
            return []
        if not isinstance(data, list):
            logger.warning(
                "Failed to parse tasks in %s (expected a JSON array, got %s); starting with empty list.",
                self._path,
                type(data).__name__,
            )
            return []

        tasks: list[Task] = []
        for i, item in enumerate(data):
            try:
                if not isinstance(item, dict):
                    raise TypeError(f"expected an object, got {type(item).__name__}")
                tasks.append(Task.from_dict(item))
            except (ValueError, TypeError, KeyError) as e:
                logger.warning("Skipping invalid task record #%d in %s (%s)", i + 1, self._path, e)
                self._invalid_records.append(item)

        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        """Overwrite the file with the full ordered list. Raises StoreError on I/O failure."""
        records: list[Any] = [t.to_dict() for t in tasks]
        records.extend(self._invalid_records)
        payload = json.dumps(records, ensure_ascii=False, indent=2)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StoreError(f"Failed to save tasks to {self._path}: {e}") from e
        logger.debug("Saved %d tasks (+%d preserved invalid) to %s", len(tasks), len(self._invalid_records), self._path)

    def append(self, task: Task) -> list[Task]:
        tasks = self.load()
        tasks.append(task)
        self.save(tasks)
        return tasks
