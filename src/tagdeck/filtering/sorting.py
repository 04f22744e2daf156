"""Ordering of image listings before filtering."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Mapping, Sequence

from tagdeck.ingestion.models import ImageEntry
from tagdeck.labels.models import Assignment

from .engine import base_name
from .models import SortCriteria, SortDirection, SortOption

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def _parse_timestamp(value: str) -> datetime | None:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def last_categorized_at(
    path: str, assignment_view: Mapping[str, Sequence[Assignment]]
) -> datetime:
    """Return the latest parseable ``assigned_at`` of ``path`` (epoch when none)."""
    stamps = [
        stamp
        for stamp in (_parse_timestamp(item.assigned_at) for item in assignment_view.get(path, ()))
        if stamp is not None
    ]
    return max(stamps, default=_EPOCH)


def sort_images(
    entries: Sequence[ImageEntry],
    criteria: SortCriteria,
    assignment_view: Mapping[str, Sequence[Assignment]],
) -> list[ImageEntry]:
    """Return ``entries`` ordered per ``criteria``; ties keep their listing order.

    Args:
        entries: Normalized image entries.
        criteria: Sort option and direction.
        assignment_view: View used by ``lastCategorized``; pass the same view
            the filter stage uses so deferred edits do not reorder the list.
    """
    option = criteria.option
    if option is SortOption.NONE:
        return list(entries)

    reverse = criteria.direction is SortDirection.DESCENDING
    if option is SortOption.NAME:
        return sorted(entries, key=lambda entry: base_name(entry.path).lower(), reverse=reverse)
    if option is SortOption.SIZE:
        return sorted(entries, key=lambda entry: entry.size_bytes or 0, reverse=reverse)
    if option is SortOption.DATE_CREATED:
        return sorted(
            entries,
            key=lambda entry: _aware(entry.created_at) if entry.created_at else _EPOCH,
            reverse=reverse,
        )
    return sorted(
        entries,
        key=lambda entry: last_categorized_at(entry.path, assignment_view),
        reverse=reverse,
    )


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


__all__ = ["last_categorized_at", "sort_images"]
