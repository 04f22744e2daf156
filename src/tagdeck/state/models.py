"""Persisted label document model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, model_validator

from tagdeck.hotkeys.models import Hotkey
from tagdeck.labels.models import Assignment, Category


def _clean_categories(raw: Any) -> list[Any]:
    cleaned: list[Any] = []
    for item in raw if isinstance(raw, list) else []:
        if isinstance(item, Category):
            cleaned.append(item)
            continue
        if not isinstance(item, Mapping):
            continue
        category_id = item.get("id")
        if not isinstance(category_id, str) or not category_id:
            continue
        entry = dict(item)
        if not isinstance(entry.get("name"), str):
            entry["name"] = ""
        if not isinstance(entry.get("color"), str):
            entry["color"] = ""
        cleaned.append(entry)
    return cleaned


def _clean_assignment(item: Any) -> Any:
    if isinstance(item, Assignment):
        return item
    # Older documents stored bare category ids instead of assignment objects.
    if isinstance(item, str):
        return {"category_id": item, "assigned_at": ""} if item else None
    if not isinstance(item, Mapping):
        return None
    category_id = item.get("category_id")
    if not isinstance(category_id, str) or not category_id:
        return None
    assigned_at = item.get("assigned_at")
    return {
        "category_id": category_id,
        "assigned_at": assigned_at if isinstance(assigned_at, str) else "",
    }


def _clean_image_categories(raw: Any) -> list[tuple[str, list[Any]]]:
    if isinstance(raw, Mapping):
        pairs: Any = list(raw.items())
    elif isinstance(raw, list):
        pairs = raw
    else:
        return []

    cleaned = []
    for pair in pairs:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            continue
        path, items = pair
        if not isinstance(path, str) or not path.strip() or not isinstance(items, list):
            continue
        assignments = [entry for entry in map(_clean_assignment, items) if entry is not None]
        if assignments:
            cleaned.append((path, assignments))
    return cleaned


class LabelDocument(BaseModel):
    """Categories, image assignments and hotkeys of one browsed directory.

    A field left as ``None`` was absent from the stored document.

    Attributes:
        categories: Ordered category definitions.
        image_categories: ``(image path, assignments)`` pairs in stored order.
        hotkeys: Hotkey bindings.
    """

    categories: Optional[List[Category]] = None
    image_categories: Optional[List[Tuple[str, List[Assignment]]]] = None
    hotkeys: Optional[List[Hotkey]] = None

    @model_validator(mode="before")
    @classmethod
    def _tolerate_malformed_entries(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        cleaned = dict(data)
        if cleaned.get("categories") is not None:
            cleaned["categories"] = _clean_categories(cleaned["categories"])
        if cleaned.get("image_categories") is not None:
            cleaned["image_categories"] = _clean_image_categories(cleaned["image_categories"])
        if cleaned.get("hotkeys") is not None:
            hotkeys = cleaned["hotkeys"]
            cleaned["hotkeys"] = [
                item for item in (hotkeys if isinstance(hotkeys, list) else [])
                if isinstance(item, (Hotkey, Mapping))
            ]
        return cleaned

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready payload written to disk."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["LabelDocument"]
