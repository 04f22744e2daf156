"""Category registry and image assignment store."""

from .assignments import AssignmentStore, AssignmentView
from .errors import LabelError, UnknownCategoryError
from .models import Assignment, Category
from .registry import CATEGORY_PALETTE, CategoryRegistry

__all__ = [
    "Assignment",
    "AssignmentStore",
    "AssignmentView",
    "CATEGORY_PALETTE",
    "Category",
    "CategoryRegistry",
    "LabelError",
    "UnknownCategoryError",
]
