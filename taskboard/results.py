"""Result values returned by the stores instead of raising for expected failures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TaskboardError:
    """Base class for every failure the data layer reports as a value."""

    message: str

    @property
    def kind(self) -> str:
        return "error"


@dataclass(frozen=True)
class ValidationError(TaskboardError):
    """Malformed input: empty or oversized fields, mismatched passwords."""

    fields: Dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return "validation"


@dataclass(frozen=True)
class ConflictError(TaskboardError):
    """The email address is already registered."""

    @property
    def kind(self) -> str:
        return "conflict"


@dataclass(frozen=True)
class AuthenticationError(TaskboardError):
    """No account matches the supplied credentials."""

    @property
    def kind(self) -> str:
        return "authentication"


@dataclass(frozen=True)
class PersistenceReadError(TaskboardError):
    """A stored payload could not be decoded. Always recovered internally."""

    key: str = ""

    @property
    def kind(self) -> str:
        return "persistence_read"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[TaskboardError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskboardError) -> "Result[T]":
        return cls(error=error)


__all__ = [
    "AuthenticationError",
    "ConflictError",
    "PersistenceReadError",
    "Result",
    "TaskboardError",
    "ValidationError",
]
