"""Decoding and encoding of hotkey action strings.

Hotkey actions are persisted as plain strings such as ``next_image`` or
``toggle_category_next_<category id>``. They are decoded once into a
:class:`HotkeyAction` so the rest of the package dispatches on
:class:`ActionKind` instead of matching prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

TOGGLE_CATEGORY_PREFIX = "toggle_category_"
TOGGLE_CATEGORY_NEXT_PREFIX = "toggle_category_next_"
ASSIGN_CATEGORY_PREFIX = "assign_category_"

# Longest prefix first so ``toggle_category_next_`` is not read as a toggle.
CATEGORY_ACTION_PREFIXES = (
    TOGGLE_CATEGORY_NEXT_PREFIX,
    TOGGLE_CATEGORY_PREFIX,
    ASSIGN_CATEGORY_PREFIX,
)


class ActionKind(str, Enum):
    """Closed set of actions a hotkey can trigger."""

    NONE = "none"
    NEXT_IMAGE = "next_image"
    PREVIOUS_IMAGE = "previous_image"
    DELETE_IMAGE_AND_NEXT = "delete_image_and_next"
    TOGGLE_CATEGORY = "toggle_category"
    TOGGLE_CATEGORY_NEXT = "toggle_category_next"
    ASSIGN_CATEGORY = "assign_category"
    UNKNOWN = "unknown"


_FIXED_ACTIONS = {
    ActionKind.NEXT_IMAGE.value: ActionKind.NEXT_IMAGE,
    ActionKind.PREVIOUS_IMAGE.value: ActionKind.PREVIOUS_IMAGE,
    ActionKind.DELETE_IMAGE_AND_NEXT.value: ActionKind.DELETE_IMAGE_AND_NEXT,
}

_PREFIX_KINDS = {
    TOGGLE_CATEGORY_NEXT_PREFIX: ActionKind.TOGGLE_CATEGORY_NEXT,
    TOGGLE_CATEGORY_PREFIX: ActionKind.TOGGLE_CATEGORY,
    ASSIGN_CATEGORY_PREFIX: ActionKind.ASSIGN_CATEGORY,
}


@dataclass(frozen=True, slots=True)
class HotkeyAction:
    """Decoded hotkey action.

    Attributes:
        kind: Action discriminator.
        category_id: Target category for category actions, otherwise ``None``.
        raw: Original encoded string.
    """

    kind: ActionKind
    category_id: Optional[str] = None
    raw: str = ""

    def encode(self) -> str:
        """Return the persisted string form of this action."""
        if self.kind is ActionKind.NONE:
            return ""
        if self.kind is ActionKind.UNKNOWN:
            return self.raw
        if self.category_id is None:
            return self.kind.value
        return f"{self.kind.value}_{self.category_id}"


def parse_action(raw: str) -> HotkeyAction:
    """Decode an action string.

    Args:
        raw: Encoded action as stored on a hotkey.

    Returns:
        HotkeyAction: ``NONE`` for an empty string, ``UNKNOWN`` for anything
        unrecognised (including a category prefix with no id after it).
    """
    if not raw:
        return HotkeyAction(ActionKind.NONE)
    fixed = _FIXED_ACTIONS.get(raw)
    if fixed is not None:
        return HotkeyAction(fixed, raw=raw)
    for prefix in CATEGORY_ACTION_PREFIXES:
        if raw.startswith(prefix):
            category_id = raw[len(prefix) :]
            if not category_id:
                break
            return HotkeyAction(_PREFIX_KINDS[prefix], category_id=category_id, raw=raw)
    return HotkeyAction(ActionKind.UNKNOWN, raw=raw)


def references_category(raw: str, category_id: str) -> bool:
    """Return True when ``raw`` names ``category_id`` through a category prefix.

    The id must either end the string or be followed by an ``_<suffix>`` token.
    Every prefix is tried independently, so matching is purely textual.
    """
    if not raw or not category_id:
        return False
    for prefix in CATEGORY_ACTION_PREFIXES:
        if not raw.startswith(prefix):
            continue
        remainder = raw[len(prefix) :]
        if remainder == category_id or remainder.startswith(f"{category_id}_"):
            return True
    return False


def toggle_category(category_id: str, *, then_next: bool = False) -> HotkeyAction:
    """Build a toggle action for ``category_id``."""
    kind = ActionKind.TOGGLE_CATEGORY_NEXT if then_next else ActionKind.TOGGLE_CATEGORY
    return HotkeyAction(kind, category_id=category_id, raw=f"{kind.value}_{category_id}")


__all__ = [
    "ActionKind",
    "HotkeyAction",
    "parse_action",
    "references_category",
    "toggle_category",
    "TOGGLE_CATEGORY_PREFIX",
    "TOGGLE_CATEGORY_NEXT_PREFIX",
    "ASSIGN_CATEGORY_PREFIX",
]
