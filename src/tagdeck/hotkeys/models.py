"""Hotkey data model."""

from __future__ import annotations

from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .actions import HotkeyAction, parse_action


def new_hotkey_id() -> str:
    """Return a fresh hotkey identifier."""
    return f"hotkey_{uuid4().hex[:12]}"


class Hotkey(BaseModel):
    """A key combination bound to an action string.

    Attributes:
        id: Stable identifier.
        key: Key name as reported by the UI (single characters upper-cased).
        modifiers: Modifier names such as ``Ctrl``, ``Alt`` or ``Shift``.
        action: Encoded action; empty when the hotkey is disarmed.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_hotkey_id)
    key: str = ""
    modifiers: List[str] = Field(default_factory=list)
    action: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _default_id(cls, value: object) -> str:
        if isinstance(value, str) and value:
            return value
        return new_hotkey_id()

    @field_validator("key", "action", mode="before")
    @classmethod
    def _default_text(cls, value: object) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("modifiers", mode="before")
    @classmethod
    def _default_modifiers(cls, value: object) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, str)]

    @property
    def parsed_action(self) -> HotkeyAction:
        """Return the decoded form of :attr:`action`."""
        return parse_action(self.action)


__all__ = ["Hotkey", "new_hotkey_id"]
