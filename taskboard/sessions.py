"""Account registration and the persisted login session."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from typing import List, Optional

from .models import Session, User
from .results import (
    AuthenticationError,
    ConflictError,
    PersistenceReadError,
    Result,
    ValidationError,
)
from .storage import KeyValueStore

logger = logging.getLogger("taskboard.sessions")

USERS_KEY = "users"
SESSION_KEY = "session"

PASSWORD_MIN_LENGTH = 6


def _generate_user_id() -> str:
    return uuid.uuid4().hex


class SessionStore:
    """Owns the users table and the current session record.

    Expected failures (validation, duplicate email, bad credentials) are
    returned as :class:`~taskboard.results.Result` values and never raised.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage
        self._lock = threading.Lock()

    def _read_users(self) -> List[User]:
        raw = self._storage.read(USERS_KEY)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("Users table must be a JSON list")
            return [User.from_dict(item) for item in payload]
        except (ValueError, TypeError, AttributeError, RecursionError) as exc:
            error = PersistenceReadError(message=str(exc), key=USERS_KEY)
            logger.warning("Ignoring unreadable users table: %s", error.message)
            return []

    def _write_users(self, users: List[User]) -> None:
        payload = json.dumps([user.to_dict() for user in users], ensure_ascii=False)
        self._storage.write(USERS_KEY, payload)

    def _write_session(self, session: Session) -> None:
        self._storage.write(SESSION_KEY, json.dumps(session.to_dict(), ensure_ascii=False))

    def list_users(self) -> List[User]:
        return self._read_users()

    def register(self, email: str, password: str, confirm_password: str) -> Result[Session]:
        if not email or not password or not confirm_password:
            return Result.failure(ValidationError(message="All fields are required"))
        if len(password) < PASSWORD_MIN_LENGTH:
            return Result.failure(
                ValidationError(
                    message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
                    fields={"password": "too_short"},
                )
            )
        if password != confirm_password:
            return Result.failure(
                ValidationError(
                    message="Passwords do not match",
                    fields={"confirm_password": "mismatch"},
                )
            )

        with self._lock:
            users = self._read_users()
            if any(user.email == email for user in users):
                return Result.failure(ConflictError(message="Email is already registered"))

            user = User(id=_generate_user_id(), email=email, password=password)
            users.append(user)
            self._write_users(users)

            session = user.to_session()
            self._write_session(session)

        logger.info("Registered user %s", user.id)
        return Result.success(session)

    def login(self, email: str, password: str) -> Result[Session]:
        for user in self._read_users():
            if user.email == email and user.password == password:
                session = user.to_session()
                self._write_session(session)
                logger.info("User %s logged in", user.id)
                return Result.success(session)

        return Result.failure(AuthenticationError(message="Invalid email or password"))

    def logout(self) -> None:
        self._storage.remove(SESSION_KEY)
        logger.info("Session cleared")

    def current_session(self) -> Optional[Session]:
        raw = self._storage.read(SESSION_KEY)
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("Session record must be a JSON object")
            return Session.from_dict(payload)
        except (ValueError, TypeError, RecursionError) as exc:
            logger.warning("Ignoring unreadable session record: %s", exc)
            return None


__all__ = ["PASSWORD_MIN_LENGTH", "SESSION_KEY", "USERS_KEY", "SessionStore"]
