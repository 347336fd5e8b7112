from pathlib import Path

import pytest

import main
from main import _parse_args
from taskboard.sessions import SessionStore
from taskboard.storage import SQLiteKeyValueStore


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.host is None
    assert args.port is None


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 8080


def test_config_option_precedes_subcommand() -> None:
    args = _parse_args(["--config", "custom.yaml", "users"])
    assert args.command == "users"
    assert args.config == "custom.yaml"


def test_config_equals_form_is_accepted() -> None:
    args = _parse_args(["--config=custom.yaml"])
    assert args.command == "serve"
    assert args.config == "custom.yaml"

    args = _parse_args(["--config=custom.yaml", "users"])
    assert args.command == "users"
    assert args.config == "custom.yaml"

    args = _parse_args(["--config=custom.yaml", "--port", "9000"])
    assert args.command == "serve"
    assert args.port == 9000


def test_users_command_lists_accounts_without_passwords(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    storage_path = tmp_path / "taskboard.sqlite3"
    storage = SQLiteKeyValueStore(storage_path)
    storage.initialize()
    SessionStore(storage).register("a@x.com", "secret1", "secret1")

    monkeypatch.setenv("TASKBOARD_STORAGE_PATH", str(storage_path))
    monkeypatch.setenv("TASKBOARD_CONFIG", str(tmp_path / "absent.yaml"))
    main.main(["users"])

    output = capsys.readouterr().out
    assert "1 user(s) found" in output
    assert "a@x.com" in output
    assert "secret1" not in output


def test_serve_passes_settings_to_uvicorn(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    captured = {}

    def fake_run(app, **kwargs):
        captured["app"] = app
        captured.update(kwargs)

    import uvicorn

    monkeypatch.setattr(uvicorn, "run", fake_run)
    monkeypatch.setenv("TASKBOARD_STORAGE_PATH", str(tmp_path / "serve.sqlite3"))
    monkeypatch.setenv("TASKBOARD_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("TASKBOARD_PORT", "9010")

    main.main(["--host", "0.0.0.0"])

    assert captured["host"] == "0.0.0.0"
    assert captured["port"] == 9010
    assert captured["app"].state.settings.port == 9010
