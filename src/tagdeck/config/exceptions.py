"""Exceptions raised while reading or resolving tagdeck settings."""


class ConfigError(Exception):
    """Raised when settings cannot be parsed, merged or validated."""
