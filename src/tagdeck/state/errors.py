"""Label document persistence errors."""


class StateError(Exception):
    """Raised when a label document cannot be read or written."""


class MissingStateError(StateError):
    """Raised when a browsed directory has no label document yet."""
