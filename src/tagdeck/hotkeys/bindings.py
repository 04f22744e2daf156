"""Hotkey collection management and key matching."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, Sequence

from .actions import ActionKind, references_category
from .models import Hotkey

LOGGER = logging.getLogger(__name__)


def default_hotkeys() -> list[Hotkey]:
    """Return the hotkeys seeded into a directory that has none."""
    return [
        Hotkey(key="ArrowRight", modifiers=[], action=ActionKind.NEXT_IMAGE.value),
        Hotkey(key="ArrowLeft", modifiers=[], action=ActionKind.PREVIOUS_IMAGE.value),
    ]


def normalize_key(key: str) -> str:
    """Upper-case single-character keys; named keys are kept as reported."""
    return key.upper() if len(key) == 1 else key


def format_display(hotkey: Hotkey) -> str:
    """Render a hotkey as ``"Ctrl + Shift + K"``."""
    return " + ".join([*hotkey.modifiers, hotkey.key])


class HotkeyBook:
    """Ordered collection of hotkeys for the browsed directory."""

    def __init__(self, hotkeys: Iterable[Hotkey] = ()) -> None:
        self._hotkeys: list[Hotkey] = list(hotkeys)

    def __iter__(self) -> Iterator[Hotkey]:
        return iter(self._hotkeys)

    def __len__(self) -> int:
        return len(self._hotkeys)

    def all(self) -> list[Hotkey]:
        return list(self._hotkeys)

    def replace(self, hotkeys: Iterable[Hotkey]) -> None:
        self._hotkeys = list(hotkeys)

    def get(self, hotkey_id: str) -> Optional[Hotkey]:
        return next((hotkey for hotkey in self._hotkeys if hotkey.id == hotkey_id), None)

    def add(self, key: str, modifiers: Sequence[str] = (), action: str = "") -> Hotkey:
        """Append a new hotkey. Duplicate combinations are checked by callers."""
        hotkey = Hotkey(key=key, modifiers=list(modifiers), action=action)
        self._hotkeys.append(hotkey)
        return hotkey

    def update(self, hotkey_id: str, **fields: object) -> Hotkey:
        """Merge ``fields`` into the hotkey identified by ``hotkey_id``.

        Raises:
            KeyError: If no hotkey has that id.
        """
        hotkey = self.get(hotkey_id)
        if hotkey is None:
            raise KeyError(hotkey_id)
        for name, value in fields.items():
            setattr(hotkey, name, value)
        return hotkey

    def remove(self, hotkey_id: str) -> bool:
        before = len(self._hotkeys)
        self._hotkeys = [hotkey for hotkey in self._hotkeys if hotkey.id != hotkey_id]
        return len(self._hotkeys) != before

    def is_duplicate(
        self, key: str, modifiers: Sequence[str], exclude_id: Optional[str] = None
    ) -> bool:
        """Return True when another hotkey uses the same key and modifier set."""
        wanted = sorted(modifiers)
        return any(
            hotkey.key == key and sorted(hotkey.modifiers) == wanted
            for hotkey in self._hotkeys
            if not (exclude_id and hotkey.id == exclude_id)
        )

    def match(self, key: str, modifiers: Sequence[str]) -> Optional[Hotkey]:
        """Return the first armed hotkey bound to ``key`` with exactly ``modifiers``."""
        normalized = normalize_key(key)
        wanted = sorted(modifiers)
        for hotkey in self._hotkeys:
            if hotkey.key == normalized and sorted(hotkey.modifiers) == wanted and hotkey.action:
                return hotkey
        return None

    def disarm_category(self, category_id: str) -> list[Hotkey]:
        """Clear the action of every hotkey referencing ``category_id``.

        Returns:
            list[Hotkey]: Hotkeys whose action was cleared.
        """
        disarmed = []
        for hotkey in self._hotkeys:
            if references_category(hotkey.action, category_id):
                hotkey.action = ""
                disarmed.append(hotkey)
        if disarmed:
            LOGGER.debug(
                "Disarmed %d hotkey(s) referencing category %s", len(disarmed), category_id
            )
        return disarmed


__all__ = ["HotkeyBook", "default_hotkeys", "format_display", "normalize_key"]
