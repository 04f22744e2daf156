"""Filtering and ordering of image listings."""

from .engine import FilterEngine, normalize_image_entries
from .models import (
    UNCATEGORIZED,
    FilterCriteria,
    NameOperator,
    SizeOperator,
    SortCriteria,
    SortDirection,
    SortOption,
)
from .sorting import sort_images

__all__ = [
    "UNCATEGORIZED",
    "FilterCriteria",
    "FilterEngine",
    "NameOperator",
    "SizeOperator",
    "SortCriteria",
    "SortDirection",
    "SortOption",
    "normalize_image_entries",
    "sort_images",
]
