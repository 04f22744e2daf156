"""Image discovery utilities."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from tagdeck.config.models import DEFAULT_IMAGE_EXTENSIONS, ScanningSettings

from .models import ImageEntry

LOGGER = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return any(part.startswith(".") for part in path.parts if part not in (".", ".."))


class ImageScanner:
    """Enumerate image files in a directory subject to configuration filters."""

    def __init__(
        self,
        *,
        recursive: bool = False,
        include_hidden: bool = False,
        follow_symlinks: bool = False,
        extensions: Sequence[str] = DEFAULT_IMAGE_EXTENSIONS,
    ) -> None:
        self.recursive = recursive
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks
        self.extensions = frozenset(ext.lower() for ext in extensions)

    @classmethod
    def from_settings(cls, settings: ScanningSettings) -> "ImageScanner":
        return cls(
            recursive=settings.recursive,
            include_hidden=settings.include_hidden,
            follow_symlinks=settings.follow_symlinks,
            extensions=settings.extensions,
        )

    def list_images(self, directory: Path) -> list[ImageEntry]:
        """Return images under ``directory`` sorted by path."""
        return sorted(self.scan(directory), key=lambda entry: entry.path)

    def scan(self, root: Path) -> Iterator[ImageEntry]:
        """Yield images discovered under ``root`` respecting configured filters."""
        root = root.expanduser().resolve()
        if not root.is_dir():
            return

        for path in self._iter_paths(root):
            if path.suffix.lower() not in self.extensions:
                continue
            if path.is_symlink() and not self.follow_symlinks:
                continue
            if not path.is_file():
                continue
            if not self.include_hidden and _is_hidden(path.relative_to(root)):
                continue
            try:
                stat = path.stat()
            except OSError as exc:
                LOGGER.debug("Skipping unreadable image %s: %s", path, exc)
                continue
            yield ImageEntry(
                path=path.as_posix(),
                size_bytes=stat.st_size,
                created_at=datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
            )

    def _iter_paths(self, root: Path) -> Iterable[Path]:
        if self.recursive:
            yield from root.rglob("*")
        else:
            yield from root.iterdir()


__all__ = ["ImageScanner"]
