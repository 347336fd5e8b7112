"""Derived views over an in-memory task collection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence, Tuple

from .models import Task


class StatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> "StatusFilter":
        try:
            return cls(raw)
        except ValueError:
            return cls.ALL


class SortField(str, Enum):
    CREATED_AT = "created_at"
    TITLE = "title"
    STATUS = "status"

    @classmethod
    def parse(cls, raw: Any) -> "SortField":
        if raw == "createdAt":
            return cls.CREATED_AT
        try:
            return cls(raw)
        except ValueError:
            return cls.CREATED_AT


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: Any) -> "SortOrder":
        return cls.ASC if raw == cls.ASC.value else cls.DESC


@dataclass(frozen=True)
class TaskStats:
    total: int = 0
    pending: int = 0
    completed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"total": self.total, "pending": self.pending, "completed": self.completed}


def _is_task_sequence(tasks: Any) -> bool:
    return isinstance(tasks, (list, tuple))


def _matches_search(task: Task, needle: str) -> bool:
    return needle in task.title.casefold() or needle in (task.description or "").casefold()


def filter_tasks(tasks: Sequence[Task], status_filter: Any = "all", search_term: str = "") -> List[Task]:
    """Select tasks by completion state, then by a case-insensitive text search."""

    if not _is_task_sequence(tasks):
        return []

    status = StatusFilter.parse(status_filter)
    if status is StatusFilter.PENDING:
        result = [task for task in tasks if not task.completed]
    elif status is StatusFilter.COMPLETED:
        result = [task for task in tasks if task.completed]
    else:
        result = list(tasks)

    term = search_term if isinstance(search_term, str) else ""
    if term.strip():
        needle = term.casefold()
        result = [task for task in result if _matches_search(task, needle)]

    return result


def calculate_task_stats(tasks: Sequence[Task]) -> TaskStats:
    if not _is_task_sequence(tasks):
        return TaskStats()

    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed is True)
    return TaskStats(total=total, pending=total - completed, completed=completed)


_SORT_KEYS: Dict[SortField, Callable[[Task], Tuple[Any, str]]] = {
    SortField.CREATED_AT: lambda task: (task.created_at, task.id),
    SortField.TITLE: lambda task: (task.title.casefold(), task.id),
    SortField.STATUS: lambda task: (task.completed, task.id),
}


def sort_tasks(tasks: Sequence[Task], sort_by: Any = "created_at", order: Any = "desc") -> List[Task]:
    """Return a new list ordered by ``sort_by``; ties fall back to the task id."""

    if not _is_task_sequence(tasks):
        return []

    key = _SORT_KEYS[SortField.parse(sort_by)]
    descending = SortOrder.parse(order) is SortOrder.DESC
    return sorted(tasks, key=key, reverse=descending)


__all__ = [
    "SortField",
    "SortOrder",
    "StatusFilter",
    "TaskStats",
    "calculate_task_stats",
    "filter_tasks",
    "sort_tasks",
]
