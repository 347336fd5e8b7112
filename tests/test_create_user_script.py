"""Tests for the account registration helper script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import create_user
from taskboard.sessions import SessionStore
from taskboard.storage import SQLiteKeyValueStore


def _fake_getpass(monkeypatch: pytest.MonkeyPatch, password: str) -> None:
    monkeypatch.setattr(create_user.getpass, "getpass", lambda prompt="": password)


def _registered_emails(path: Path) -> list[str]:
    storage = SQLiteKeyValueStore(path)
    storage.initialize()
    return [user.email for user in SessionStore(storage).list_users()]


def test_create_user_writes_to_configured_storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config" / "taskboard.yaml"
    config_path.parent.mkdir()
    config_path.write_text("storage_path: ../alt/custom.sqlite3\n", encoding="utf-8")

    monkeypatch.delenv("TASKBOARD_STORAGE_PATH", raising=False)
    monkeypatch.setenv("TASKBOARD_CONFIG", str(config_path))
    _fake_getpass(monkeypatch, "secret1")

    assert create_user.main(["a@x.com"]) == 0

    assert _registered_emails(tmp_path / "alt" / "custom.sqlite3") == ["a@x.com"]


def test_create_user_accepts_config_option(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("storage_path: users.sqlite3\n", encoding="utf-8")

    monkeypatch.delenv("TASKBOARD_STORAGE_PATH", raising=False)
    monkeypatch.setenv("TASKBOARD_CONFIG", str(tmp_path / "absent.yaml"))
    _fake_getpass(monkeypatch, "secret1")

    assert create_user.main(["--config", str(config_path), "b@x.com"]) == 0

    assert _registered_emails(tmp_path / "users.sqlite3") == ["b@x.com"]


def test_storage_option_overrides_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("storage_path: configured.sqlite3\n", encoding="utf-8")
    override = tmp_path / "override.sqlite3"

    monkeypatch.setenv("TASKBOARD_CONFIG", str(config_path))
    _fake_getpass(monkeypatch, "secret1")

    assert create_user.main(["--storage", str(override), "c@x.com"]) == 0

    assert _registered_emails(override) == ["c@x.com"]
    assert not (tmp_path / "configured.sqlite3").exists()


def test_duplicate_email_returns_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    storage_path = tmp_path / "taskboard.sqlite3"
    monkeypatch.setenv("TASKBOARD_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("TASKBOARD_STORAGE_PATH", str(storage_path))
    _fake_getpass(monkeypatch, "secret1")

    assert create_user.main(["a@x.com"]) == 0
    assert create_user.main(["a@x.com"]) == 1
    assert _registered_emails(storage_path) == ["a@x.com"]
