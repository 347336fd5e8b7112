"""Display theme preference shared by every account of the local profile."""

from __future__ import annotations

from enum import Enum

from .storage import KeyValueStore

THEME_KEY = "theme"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


def load_theme(storage: KeyValueStore, default: Theme = Theme.LIGHT) -> Theme:
    raw = storage.read(THEME_KEY)
    if raw is None:
        return default
    try:
        return Theme(raw)
    except ValueError:
        return default


def save_theme(storage: KeyValueStore, theme: Theme) -> None:
    storage.write(THEME_KEY, Theme(theme).value)


def toggle_theme(theme: Theme) -> Theme:
    return Theme.LIGHT if theme is Theme.DARK else Theme.DARK


__all__ = ["THEME_KEY", "Theme", "load_theme", "save_theme", "toggle_theme"]
