"""Per-user task collections on top of the key-value store."""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence

from .models import Task
from .results import PersistenceReadError
from .storage import KeyValueStore

logger = logging.getLogger("taskboard.repository")

TASKS_KEY_PREFIX = "tasks:"


def task_key(user_id: str) -> str:
    return f"{TASKS_KEY_PREFIX}{user_id}"


class TaskRepository:
    """Load and save the complete task collection of a user.

    The repository knows nothing about filtering or validation. Every save
    replaces the stored collection with the one supplied by the caller.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage

    def load(self, user_id: str) -> List[Task]:
        key = task_key(user_id)
        raw = self._storage.read(key)
        if raw is None:
            return []

        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Task collection must be a JSON list")
            return [Task.from_dict(item) for item in payload]
        except (ValueError, TypeError, AttributeError, RecursionError) as exc:
            error = PersistenceReadError(message=str(exc), key=key)
            logger.warning("Ignoring unreadable task collection %s: %s", error.key, error.message)
            return []

    def save(self, user_id: str, tasks: Sequence[Task]) -> None:
        payload = json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)
        self._storage.write(task_key(user_id), payload)
        logger.debug("Saved %d task(s) for user %s", len(tasks), user_id)

    @staticmethod
    def remove_task(tasks: Sequence[Task], task_id: str) -> List[Task]:
        return remove_task(tasks, task_id)


def remove_task(tasks: Sequence[Task], task_id: str) -> List[Task]:
    """Return a new list without ``task_id``. Unknown ids leave the content unchanged."""

    return [task for task in tasks if task.id != task_id]


def find_task(tasks: Sequence[Task], task_id: str) -> Optional[Task]:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def replace_task(tasks: Sequence[Task], updated: Task) -> List[Task]:
    """Swap in ``updated`` for the task with the same id, keeping its position."""

    return [updated if task.id == updated.id else task for task in tasks]


__all__ = ["TaskRepository", "find_task", "remove_task", "replace_task", "task_key"]
