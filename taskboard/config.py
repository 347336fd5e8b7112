"""Configuration management for the task tracker service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .preferences import Theme
from .storage import resolve_storage_path

_ENV_OVERRIDES = {
    "storage_path": "TASKBOARD_STORAGE_PATH",
    "host": "TASKBOARD_HOST",
    "port": "TASKBOARD_PORT",
    "log_level": "TASKBOARD_LOG_LEVEL",
    "default_theme": "TASKBOARD_DEFAULT_THEME",
}


def _parse_port(value: object) -> int:
    try:
        port = int(str(value))
    except ValueError as exc:
        raise ValueError(f"Invalid port '{value}'") from exc
    if not 1 <= port <= 65535:
        raise ValueError(f"Port must be between 1 and 65535, got {port}")
    return port


def _parse_log_level(value: object) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level '{value}'")
    return level


def _parse_theme(value: object) -> Theme:
    try:
        return Theme(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown theme '{value}'; expected 'light' or 'dark'") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service and command line tools."""

    storage_path: Path
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    default_theme: Theme = Theme.LIGHT

    @staticmethod
    def from_dict(data: Mapping[str, object], base_path: Path | None = None) -> "Settings":
        """Create :class:`Settings` from raw dictionary data, filling in defaults."""

        unknown = set(data.keys()) - set(_ENV_OVERRIDES)
        if unknown:
            raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

        raw_storage = data.get("storage_path")
        if raw_storage:
            candidate = Path(str(raw_storage)).expanduser()
            if not candidate.is_absolute() and base_path is not None:
                candidate = base_path / candidate
            storage_path = candidate.resolve(strict=False)
        else:
            storage_path = resolve_storage_path(None)

        host = str(data.get("host") or "127.0.0.1").strip() or "127.0.0.1"

        return Settings(
            storage_path=storage_path,
            host=host,
            port=_parse_port(data.get("port", 8000)),
            log_level=_parse_log_level(data.get("log_level", "INFO")),
            default_theme=_parse_theme(data.get("default_theme", Theme.LIGHT.value)),
        )

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}
        for field_name, env_name in _ENV_OVERRIDES.items():
            raw = env.get(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        if not values:
            return self

        updates: Dict[str, object] = {}
        if "storage_path" in values:
            updates["storage_path"] = resolve_storage_path(str(values["storage_path"]))
        if "host" in values:
            updates["host"] = str(values["host"])
        if "port" in values:
            updates["port"] = _parse_port(values["port"])
        if "log_level" in values:
            updates["log_level"] = _parse_log_level(values["log_level"])
        if "default_theme" in values:
            updates["default_theme"] = _parse_theme(values["default_theme"])
        return replace(self, **updates)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "taskboard.yaml").resolve(strict=False)
    return candidate


def load_settings(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from a YAML file (if present) and apply environment overrides."""

    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get("TASKBOARD_CONFIG"))

    raw: Dict[str, object] = {}
    if path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        raw = loaded

    settings = Settings.from_dict(raw, base_path=path.parent)
    return settings.with_env_overrides(env)


__all__ = ["Settings", "load_settings", "resolve_config_path"]
