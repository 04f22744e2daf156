"""Hotkey bindings and action decoding."""

from .actions import (
    ActionKind,
    HotkeyAction,
    parse_action,
    references_category,
    toggle_category,
)
from .bindings import HotkeyBook, default_hotkeys, format_display, normalize_key
from .models import Hotkey

__all__ = [
    "ActionKind",
    "Hotkey",
    "HotkeyAction",
    "HotkeyBook",
    "default_hotkeys",
    "format_display",
    "normalize_key",
    "parse_action",
    "references_category",
    "toggle_category",
]
