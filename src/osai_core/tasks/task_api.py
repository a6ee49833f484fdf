# src/osai_core/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.ports import TaskRepo
from .task_models import Task, format_when
from .task_parser import parse_task

logger = logging.getLogger(__name__)


def add_task(task_store: TaskRepo, raw: str) -> Task:
    """
    Parse user input and append the task (load -> append -> save).

    Raises ParseError for bad input and StoreError if the file can't be written.
    """
    task = parse_task(raw)
    tasks = task_store.append(task)
    logger.info("Task added when=%s name=%r total=%d", format_when(task.when), task.name, len(tasks))
    return task


def format_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No scheduled tasks."
    lines = ["--- Scheduled Tasks ---"]
    for i, task in enumerate(tasks, start=1):
        status = "[DONE]" if task.notified else "[PENDING]"
        lines.append(f"{i}. {format_when(task.when)} | {task.name} {status}")
    lines.append("-----------------------")
    return "\n".join(lines)


def list_tasks(task_store: TaskRepo) -> str:
    return format_tasks(task_store.load())
