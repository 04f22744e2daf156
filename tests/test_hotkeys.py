"""Hotkey decoding and matching tests."""

from __future__ import annotations

import pytest

from tagdeck.hotkeys import (
    ActionKind,
    Hotkey,
    HotkeyAction,
    HotkeyBook,
    default_hotkeys,
    format_display,
    parse_action,
    references_category,
    toggle_category,
)


@pytest.mark.parametrize(
    ("raw", "kind", "category_id"),
    [
        ("", ActionKind.NONE, None),
        ("next_image", ActionKind.NEXT_IMAGE, None),
        ("previous_image", ActionKind.PREVIOUS_IMAGE, None),
        ("delete_image_and_next", ActionKind.DELETE_IMAGE_AND_NEXT, None),
        ("toggle_category_keep", ActionKind.TOGGLE_CATEGORY, "keep"),
        ("toggle_category_next_keep", ActionKind.TOGGLE_CATEGORY_NEXT, "keep"),
        ("assign_category_category_abc", ActionKind.ASSIGN_CATEGORY, "category_abc"),
        ("toggle_category_", ActionKind.UNKNOWN, None),
        ("launch_rockets", ActionKind.UNKNOWN, None),
    ],
)
def test_parse_action(raw: str, kind: ActionKind, category_id: str | None) -> None:
    action = parse_action(raw)

    assert action.kind is kind
    assert action.category_id == category_id
    assert action.encode() == raw


def test_toggle_category_builder_encodes() -> None:
    assert toggle_category("keep").encode() == "toggle_category_keep"
    assert toggle_category("keep", then_next=True) == HotkeyAction(
        ActionKind.TOGGLE_CATEGORY_NEXT, category_id="keep", raw="toggle_category_next_keep"
    )


def test_references_category_requires_exact_id_or_suffix() -> None:
    assert references_category("toggle_category_cat", "cat")
    assert references_category("toggle_category_next_cat", "cat")
    assert references_category("assign_category_cat", "cat")
    assert references_category("toggle_category_cat_extra", "cat")
    assert not references_category("toggle_category_cats", "cat")
    assert not references_category("next_image", "cat")
    assert not references_category("", "cat")


def test_default_hotkeys_bind_arrows() -> None:
    bindings = {hotkey.key: hotkey.action for hotkey in default_hotkeys()}

    assert bindings == {"ArrowRight": "next_image", "ArrowLeft": "previous_image"}


def test_match_normalizes_single_characters_and_ignores_modifier_order() -> None:
    book = HotkeyBook()
    hotkey = book.add("K", ["Shift", "Ctrl"], "toggle_category_keep")

    assert book.match("k", ["Ctrl", "Shift"]) is hotkey
    assert book.match("k", ["Ctrl"]) is None
    assert book.match("ArrowRight", []) is None


def test_match_skips_disarmed_hotkeys() -> None:
    book = HotkeyBook()
    book.add("K", [], "")
    armed = book.add("K", [], "next_image")

    assert book.match("K", []) is armed


def test_is_duplicate_is_order_insensitive_and_honours_exclusion() -> None:
    book = HotkeyBook()
    hotkey = book.add("K", ["Ctrl", "Alt"], "next_image")

    assert book.is_duplicate("K", ["Alt", "Ctrl"])
    assert not book.is_duplicate("K", ["Alt"])
    assert not book.is_duplicate("K", ["Ctrl", "Alt"], exclude_id=hotkey.id)


def test_update_and_remove() -> None:
    book = HotkeyBook()
    hotkey = book.add("A")

    book.update(hotkey.id, action="previous_image", modifiers=["Alt"])
    assert hotkey.parsed_action.kind is ActionKind.PREVIOUS_IMAGE
    assert format_display(hotkey) == "Alt + A"

    assert book.remove(hotkey.id) is True
    assert book.remove(hotkey.id) is False
    with pytest.raises(KeyError):
        book.update(hotkey.id, action="next_image")


def test_hotkey_defaults_malformed_fields() -> None:
    hotkey = Hotkey.model_validate({"id": None, "key": 5, "modifiers": "Ctrl", "action": None})

    assert hotkey.id.startswith("hotkey_")
    assert hotkey.key == ""
    assert hotkey.modifiers == []
    assert hotkey.action == ""
