"""Data layer and local HTTP service for a personal task tracker."""

from __future__ import annotations

from typing import Any

from .repository import TaskRepository
from .sessions import SessionStore
from .storage import MemoryKeyValueStore, SQLiteKeyValueStore, resolve_storage_path


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the HTTP application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "SessionStore",
    "TaskRepository",
    "create_app",
    "resolve_storage_path",
]
