"""Derive where the label document of a browsed directory lives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class DocumentLocation:
    """Directory and optional filename of a label document.

    Attributes:
        directory: Directory holding the document; empty when unresolved.
        filename: Filename, or None to use the repository default.
    """

    directory: str
    filename: Optional[str] = None


def normalize_separators(value: str) -> str:
    """Return ``value`` with backslashes converted to forward slashes."""
    return value.replace("\\", "/")


def resolve_config_location(config_file_path: str, current_directory: str) -> DocumentLocation:
    """Split a configured document path into directory and filename.

    Args:
        config_file_path: User-configured full path; may be empty, a bare
            filename, or end with a slash.
        current_directory: Directory currently browsed.

    Returns:
        DocumentLocation: Location to load from and save to.
    """
    path = normalize_separators(config_file_path or "")
    if not path:
        return DocumentLocation(current_directory, None)

    last_slash = path.rfind("/")
    if last_slash < 0:
        return DocumentLocation(current_directory, path)

    directory = path[:last_slash]
    if directory in ("", "."):
        directory = current_directory
    filename = path[last_slash + 1 :] or None
    return DocumentLocation(directory, filename)


__all__ = ["DocumentLocation", "normalize_separators", "resolve_config_location"]
