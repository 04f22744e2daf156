"""Label management errors."""


class LabelError(Exception):
    """Base exception for category and assignment operations."""


class UnknownCategoryError(LabelError, KeyError):
    """Raised when an operation names a category that is not registered."""
