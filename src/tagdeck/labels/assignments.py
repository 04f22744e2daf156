"""Per-image category assignments."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from .models import Assignment, utc_timestamp
from .registry import CategoryRegistry

LOGGER = logging.getLogger(__name__)

AssignmentView = Mapping[str, Sequence[Assignment]]


class AssignmentStore:
    """Map image paths to their ordered assignment lists.

    A path present in the store always has at least one assignment; removing
    the last one deletes the entry.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        *,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        """Initialize an empty store.

        Args:
            registry: Source of mutual-exclusion rules.
            clock: Returns the ``assigned_at`` value for new assignments.
        """
        self._registry = registry
        self._clock = clock
        self._entries: dict[str, list[Assignment]] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: str) -> list[Assignment]:
        return list(self._entries.get(path, ()))

    def category_ids(self, path: str) -> list[str]:
        return [assignment.category_id for assignment in self._entries.get(path, ())]

    def has(self, path: str, category_id: str) -> bool:
        return any(item.category_id == category_id for item in self._entries.get(path, ()))

    def count(self, category_id: str) -> int:
        """Return how many images carry ``category_id``."""
        return sum(
            1
            for assignments in self._entries.values()
            if any(item.category_id == category_id for item in assignments)
        )

    def view(self) -> AssignmentView:
        """Return a read-only live view of the mapping."""
        return MappingProxyType(self._entries)

    def snapshot(self) -> AssignmentView:
        """Return an immutable point-in-time copy of the mapping."""
        return MappingProxyType(
            {path: tuple(assignments) for path, assignments in self._entries.items()}
        )

    def pairs(self) -> list[tuple[str, list[Assignment]]]:
        """Return ``(path, assignments)`` pairs in insertion order for persistence."""
        return [(path, list(assignments)) for path, assignments in self._entries.items()]

    def replace(self, pairs: Iterable[tuple[str, Sequence[Assignment]]]) -> None:
        """Replace every entry; pairs with no assignments are skipped."""
        self._entries = {path: list(items) for path, items in pairs if items}

    def clear(self) -> None:
        self._entries.clear()

    def assign(self, path: str, category_id: str) -> bool:
        """Attach ``category_id`` to ``path``.

        Assignments whose category is listed in the new category's
        ``mutually_exclusive_with`` are removed afterwards.

        Returns:
            bool: False if the category was already attached (nothing changed).
        """
        current = self._entries.get(path, [])
        if any(item.category_id == category_id for item in current):
            return False

        excluded = self._registry.exclusive_peers(category_id) - {category_id}
        updated = [*current, Assignment(category_id=category_id, assigned_at=self._clock())]
        if excluded:
            updated = [item for item in updated if item.category_id not in excluded]
        self._entries[path] = updated
        LOGGER.debug("Assigned %s to %s", category_id, path)
        return True

    def remove(self, path: str, category_id: str) -> bool:
        """Detach ``category_id`` from ``path``; returns whether it was attached."""
        current = self._entries.get(path)
        if not current:
            return False
        remaining = [item for item in current if item.category_id != category_id]
        if len(remaining) == len(current):
            return False
        if remaining:
            self._entries[path] = remaining
        else:
            del self._entries[path]
        LOGGER.debug("Removed %s from %s", category_id, path)
        return True

    def toggle(self, path: str, category_id: str) -> bool:
        """Detach ``category_id`` if attached, otherwise assign it."""
        if self.has(path, category_id):
            return self.remove(path, category_id)
        return self.assign(path, category_id)

    def remove_category(self, category_id: str) -> list[str]:
        """Strip ``category_id`` from every image.

        Returns:
            list[str]: Paths that carried the category.
        """
        affected = [path for path in self._entries if self.has(path, category_id)]
        for path in affected:
            self.remove(path, category_id)
        return affected


__all__ = ["AssignmentStore", "AssignmentView"]
