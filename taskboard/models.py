"""Domain records persisted by the task tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def parse_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string")
    return value


@dataclass(frozen=True)
class User:
    """A registered account. The password is stored exactly as entered."""

    id: str
    email: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "password": self.password}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "User":
        return User(
            id=_require_text(data, "id"),
            email=_require_text(data, "email"),
            password=_require_text(data, "password"),
        )

    def to_session(self) -> "Session":
        return Session(id=self.id, email=self.email)


@dataclass(frozen=True)
class Session:
    """The logged-in user as seen by the rest of the application."""

    id: str
    email: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Session":
        return Session(id=_require_text(data, "id"), email=_require_text(data, "email"))


@dataclass(frozen=True)
class Task:
    """A single to-do item owned by one user."""

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": serialize_datetime(self.created_at),
            "updatedAt": serialize_datetime(self.updated_at),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Task":
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError("Field 'completed' must be a boolean")
        description = data.get("description") or ""
        if not isinstance(description, str):
            raise ValueError("Field 'description' must be a string")
        return Task(
            id=_require_text(data, "id"),
            title=_require_text(data, "title"),
            description=description,
            completed=completed,
            created_at=parse_datetime(_require_text(data, "createdAt")),
            updated_at=parse_datetime(_require_text(data, "updatedAt")),
        )


__all__ = [
    "Session",
    "Task",
    "User",
    "parse_datetime",
    "serialize_datetime",
    "utcnow",
]
