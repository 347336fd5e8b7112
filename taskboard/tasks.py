"""Construction, validation and mutation of individual task records.

Every function here is pure: records are frozen dataclasses and updates
return a new :class:`~taskboard.models.Task`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping

from .models import Task, utcnow

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

_UPDATABLE_FIELDS = frozenset({"title", "description", "completed"})
_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


@dataclass(frozen=True)
class TaskValidation:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)


def _generate_task_id() -> str:
    return uuid.uuid4().hex


def _next_timestamp(previous: datetime) -> datetime:
    # Strictly after the previous value even when the clock has not advanced.
    now = utcnow()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def create_task(title: str, description: str = "") -> Task:
    """Build a new pending task. Run :func:`validate_task` beforehand."""

    now = utcnow()
    return Task(
        id=_generate_task_id(),
        title=title.strip(),
        description=(description or "").strip(),
        completed=False,
        created_at=now,
        updated_at=now,
    )


def update_task(task: Task, updates: Mapping[str, Any]) -> Task:
    """Return a copy of ``task`` with ``updates`` applied and ``updated_at`` refreshed."""

    for name in updates:
        if name in _IMMUTABLE_FIELDS:
            raise ValueError(f"Task field '{name}' cannot be changed")
        if name not in _UPDATABLE_FIELDS:
            raise ValueError(f"Unknown task field '{name}'")

    changes: Dict[str, Any] = dict(updates)
    if "completed" in changes:
        changes["completed"] = bool(changes["completed"])
    return replace(task, **changes, updated_at=_next_timestamp(task.updated_at))


def toggle_task(task: Task) -> Task:
    return update_task(task, {"completed": not task.completed})


def edit_task(task: Task, title: str, description: str = "") -> Task:
    return update_task(
        task,
        {"title": title.strip(), "description": (description or "").strip()},
    )


def validate_task(data: Mapping[str, Any]) -> TaskValidation:
    """Check title and description limits on trimmed values.

    Both checks are computed independently; the description never masks a
    title problem and vice versa.
    """

    errors: Dict[str, str] = {}

    raw_title = data.get("title")
    title = raw_title.strip() if isinstance(raw_title, str) else ""
    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be {TITLE_MAX_LENGTH} characters or fewer"

    raw_description = data.get("description")
    description = raw_description.strip() if isinstance(raw_description, str) else ""
    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = (
            f"Description must be {DESCRIPTION_MAX_LENGTH} characters or fewer"
        )

    return TaskValidation(is_valid=not errors, errors=errors)


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "TaskValidation",
    "create_task",
    "edit_task",
    "toggle_task",
    "update_task",
    "validate_task",
]
