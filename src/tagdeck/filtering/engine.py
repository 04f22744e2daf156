"""Compute the subset of images matching the active filter criteria."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Callable, Iterable, Optional, Sequence

from tagdeck.ingestion.models import ImageEntry
from tagdeck.labels.models import Assignment

from .models import UNCATEGORIZED, FilterCriteria, NameOperator, SizeOperator

LOGGER = logging.getLogger(__name__)

KILOBYTE = 1024
_LEADING_INTEGER = re.compile(r"^[+-]?\d+")
_PATH_SEPARATORS = re.compile(r"[/\\]")

SizeLookup = Callable[[str], Optional[int]]


def base_name(path: str) -> str:
    """Return the filename part of ``path`` for either separator style."""
    return _PATH_SEPARATORS.split(path)[-1]


def _usable_path(value: object) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _usable_size(value: object) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def normalize_image_entries(raw: Optional[Iterable[object]]) -> list[ImageEntry]:
    """Convert untrusted image listings into :class:`ImageEntry` objects.

    Accepted items are non-blank strings, :class:`ImageEntry` instances,
    mappings with a ``path`` key, and objects with a ``path`` attribute whose
    value is a non-blank string. Everything else is dropped, never coerced.
    """
    if raw is None or isinstance(raw, (str, bytes, Mapping)):
        return []

    entries: list[ImageEntry] = []
    dropped = 0
    for item in raw:
        if isinstance(item, ImageEntry):
            if _usable_path(item.path):
                entries.append(item)
            else:
                dropped += 1
            continue
        if isinstance(item, str):
            path = _usable_path(item)
            size = None
        elif isinstance(item, Mapping):
            path = _usable_path(item.get("path"))
            size = _usable_size(item.get("size_bytes", item.get("size")))
        else:
            path = _usable_path(getattr(item, "path", None))
            size = _usable_size(getattr(item, "size_bytes", getattr(item, "size", None)))
        if path is None:
            dropped += 1
            continue
        entries.append(ImageEntry(path=path, size_bytes=size))

    if dropped:
        LOGGER.debug("Dropped %d malformed image entries", dropped)
    return entries


def parse_size_kb(value: Optional[str]) -> Optional[int]:
    """Parse a kilobyte string into bytes; blank, invalid or negative yields None."""
    if not value or not value.strip():
        return None
    match = _LEADING_INTEGER.match(value.strip())
    if match is None:
        return None
    parsed = int(match.group(0))
    if parsed < 0:
        return None
    return parsed * KILOBYTE


def matches_name(name: str, criteria: FilterCriteria) -> bool:
    """Apply the name stage to a base filename."""
    pattern = criteria.name_pattern
    if not criteria.case_sensitive:
        name = name.lower()
        pattern = pattern.lower()

    operator = criteria.name_operator
    if operator == NameOperator.CONTAINS.value:
        return pattern in name
    if operator == NameOperator.STARTS_WITH.value:
        return name.startswith(pattern)
    if operator == NameOperator.ENDS_WITH.value:
        return name.endswith(pattern)
    if operator == NameOperator.EXACT.value:
        return name == pattern
    return True


def size_predicate(criteria: FilterCriteria) -> Optional[Callable[[int], bool]]:
    """Build the size-stage predicate, or None when the stage passes everything."""
    threshold = parse_size_kb(criteria.size_value)
    if threshold is None:
        return None

    if criteria.size_operator == SizeOperator.LESS_THAN.value:
        return lambda size: size < threshold
    if criteria.size_operator == SizeOperator.BETWEEN.value:
        second = parse_size_kb(criteria.size_value2)
        if second is None:
            return None
        low, high = min(threshold, second), max(threshold, second)
        return lambda size: low <= size <= high
    return lambda size: size > threshold


class FilterEngine:
    """Filter image listings by category, name and size.

    The engine is stateless: the assignment view is chosen by the caller,
    which lets a frozen snapshot stand in for the live store.
    """

    def filter_entries(
        self,
        all_paths: Optional[Iterable[object]],
        criteria: FilterCriteria,
        assignment_view: Mapping[str, Sequence[Assignment]],
        size_of: Optional[SizeLookup] = None,
    ) -> list[ImageEntry]:
        """Return matching entries in their original relative order.

        Args:
            all_paths: Image listing; malformed items are dropped.
            criteria: Active filter criteria.
            assignment_view: Mapping consulted by the category stage.
            size_of: Size lookup used when an entry carries no size.

        Returns:
            list[ImageEntry]: Entries passing every stage.
        """
        entries = normalize_image_entries(all_paths)

        if criteria.category_id:
            entries = [
                entry
                for entry in entries
                if self._matches_category(entry.path, criteria.category_id, assignment_view)
            ]

        if criteria.name_pattern:
            entries = [entry for entry in entries if matches_name(base_name(entry.path), criteria)]
            if criteria.name_operator not in {operator.value for operator in NameOperator}:
                LOGGER.debug(
                    "Unknown name operator %r; name filter passes every image",
                    criteria.name_operator,
                )

        if criteria.size_value:
            predicate = size_predicate(criteria)
            if predicate is not None:
                entries = [
                    entry for entry in entries if predicate(self._size(entry, size_of))
                ]

        return entries

    def get_filtered_images(
        self,
        all_paths: Optional[Iterable[object]],
        criteria: FilterCriteria,
        assignment_view: Mapping[str, Sequence[Assignment]],
        size_of: Optional[SizeLookup] = None,
    ) -> list[str]:
        """Return matching image paths in their original relative order."""
        return [
            entry.path
            for entry in self.filter_entries(all_paths, criteria, assignment_view, size_of)
        ]

    @staticmethod
    def _matches_category(
        path: str, category_id: str, view: Mapping[str, Sequence[Assignment]]
    ) -> bool:
        assignments = view.get(path) or ()
        if category_id == UNCATEGORIZED:
            return not assignments
        return any(item.category_id == category_id for item in assignments)

    @staticmethod
    def _size(entry: ImageEntry, size_of: Optional[SizeLookup]) -> int:
        if entry.size_bytes is not None:
            return entry.size_bytes
        if size_of is not None:
            return size_of(entry.path) or 0
        return 0


__all__ = [
    "FilterEngine",
    "KILOBYTE",
    "base_name",
    "matches_name",
    "normalize_image_entries",
    "parse_size_kb",
    "size_predicate",
]
