"""Filter and sort criteria models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

UNCATEGORIZED = "uncategorized"


class NameOperator(str, Enum):
    """Recognised name-matching operators."""

    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    EXACT = "exact"


class SizeOperator(str, Enum):
    """Recognised size comparison operators."""

    LARGER_THAN = "largerThan"
    LESS_THAN = "lessThan"
    BETWEEN = "between"


class SortOption(str, Enum):
    """Orderings applied before filtering."""

    NONE = "none"
    NAME = "name"
    SIZE = "size"
    DATE_CREATED = "dateCreated"
    LAST_CATEGORIZED = "lastCategorized"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class FilterCriteria(BaseModel):
    """Active rule set used to compute the visible image subset.

    Operators are plain strings so that values coming from a UI or a saved
    setting are accepted as-is; an unrecognised name operator matches every
    image and an unrecognised size operator behaves like ``largerThan``.

    Attributes:
        category_id: ``""`` for no category filter, ``"uncategorized"`` for
            images without assignments, otherwise a category id.
        name_pattern: Pattern matched against the base filename; empty disables
            the name stage.
        name_operator: One of :class:`NameOperator` values.
        case_sensitive: Whether the name stage compares case-sensitively.
        size_operator: One of :class:`SizeOperator` values.
        size_value: Size threshold in kilobytes; empty disables the size stage.
        size_value2: Upper/lower bound in kilobytes for ``between``.
    """

    category_id: str = ""
    name_pattern: str = ""
    name_operator: str = NameOperator.CONTAINS.value
    case_sensitive: bool = False
    size_operator: str = SizeOperator.LARGER_THAN.value
    size_value: str = ""
    size_value2: str = ""

    @property
    def has_category_filter(self) -> bool:
        return bool(self.category_id)


class SortCriteria(BaseModel):
    """Ordering of the image list."""

    option: SortOption = SortOption.NONE
    direction: SortDirection = Field(default=SortDirection.ASCENDING)


__all__ = [
    "UNCATEGORIZED",
    "FilterCriteria",
    "NameOperator",
    "SizeOperator",
    "SortCriteria",
    "SortDirection",
    "SortOption",
]
