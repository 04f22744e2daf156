"""Category definitions and their mutual-exclusion rules."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional
from uuid import uuid4

from .errors import UnknownCategoryError
from .models import Category

if TYPE_CHECKING:
    from tagdeck.collaborators import ConfirmPrompt
    from tagdeck.hotkeys import HotkeyBook

    from .assignments import AssignmentStore

LOGGER = logging.getLogger(__name__)

CATEGORY_PALETTE = (
    "#22c55e",
    "#3b82f6",
    "#a855f7",
    "#f59e0b",
    "#ef4444",
    "#06b6d4",
    "#ec4899",
    "#84cc16",
    "#f97316",
    "#6366f1",
)

DELETE_CONFIRMATION = (
    "Are you sure you want to delete this category? This will remove it from all images."
)


def new_category_id() -> str:
    """Return a fresh category identifier."""
    return f"category_{uuid4().hex[:12]}"


class CategoryRegistry:
    """Own the ordered list of categories."""

    def __init__(
        self,
        categories: Iterable[Category] = (),
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the registry.

        Args:
            categories: Initial categories, kept in the given order.
            rng: Random source used to pick default colors.
        """
        self._categories: list[Category] = list(categories)
        self._rng = rng or random.Random()

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return any(category.id == category_id for category in self._categories)

    def all(self) -> list[Category]:
        return list(self._categories)

    def replace(self, categories: Iterable[Category]) -> None:
        self._categories = list(categories)

    def get(self, category_id: str) -> Optional[Category]:
        return next((item for item in self._categories if item.id == category_id), None)

    def require(self, category_id: str) -> Category:
        """Return the category or raise :class:`UnknownCategoryError`."""
        category = self.get(category_id)
        if category is None:
            raise UnknownCategoryError(f"Unknown category: {category_id}")
        return category

    def find_by_name(self, name: str) -> Optional[Category]:
        """Return the first category whose name matches ``name`` case-insensitively."""
        wanted = name.strip().lower()
        return next(
            (item for item in self._categories if item.name.strip().lower() == wanted), None
        )

    def exclusive_peers(self, category_id: str) -> frozenset[str]:
        """Return the ids removed from an image when ``category_id`` is assigned.

        Unknown categories exclude nothing.
        """
        category = self.get(category_id)
        if category is None:
            return frozenset()
        return frozenset(category.mutually_exclusive_with)

    def create(self, name: str, color: Optional[str] = None) -> Category:
        """Create and register a category.

        Duplicate names are not rejected here; callers check
        :meth:`is_duplicate_name` first.

        Args:
            name: Display name.
            color: Display color. A palette color is picked at random when omitted.

        Returns:
            Category: The registered category.
        """
        category = Category(
            id=new_category_id(),
            name=name,
            color=color or self._rng.choice(CATEGORY_PALETTE),
        )
        self._categories.append(category)
        LOGGER.debug("Created category %s (%s)", category.id, category.name)
        return category

    def is_duplicate_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """Return True when another category already uses ``name``.

        The candidate is trimmed and lower-cased; stored names are only
        lower-cased, so a stored ``" Keep"`` does not collide with ``"keep"``.
        """
        candidate = name.strip().lower()
        return any(
            category.name.lower() == candidate
            for category in self._categories
            if not (exclude_id and category.id == exclude_id)
        )

    def update(self, category_id: str, **fields: Any) -> Category:
        """Merge ``fields`` into the category in place.

        Mutual-exclusion symmetry is not revalidated.

        Raises:
            UnknownCategoryError: If ``category_id`` is not registered.
        """
        category = self.require(category_id)
        for field_name, value in fields.items():
            setattr(category, field_name, value)
        return category

    def delete(
        self,
        category_id: str,
        *,
        confirm: "ConfirmPrompt",
        assignments: "AssignmentStore",
        hotkeys: "HotkeyBook",
    ) -> bool:
        """Delete a category after confirmation, cascading to images and hotkeys.

        Args:
            category_id: Category to delete.
            confirm: Yes/no prompt; a declined prompt aborts without changes.
            assignments: Store from which the category is stripped.
            hotkeys: Hotkeys referencing the category are disarmed, not removed.

        Returns:
            bool: True if the category was deleted, False if declined.
        """
        if not confirm(DELETE_CONFIRMATION, title="Delete Category"):
            LOGGER.debug("Deletion of category %s declined", category_id)
            return False

        self._categories = [item for item in self._categories if item.id != category_id]
        affected = assignments.remove_category(category_id)
        hotkeys.disarm_category(category_id)
        LOGGER.info(
            "Deleted category %s; removed from %d image(s)", category_id, len(affected)
        )
        return True


__all__ = ["CategoryRegistry", "CATEGORY_PALETTE", "DELETE_CONFIRMATION", "new_category_id"]
