"""Interfaces of the external collaborators the labeling engine calls into."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from tagdeck.ingestion.models import ImageEntry


@runtime_checkable
class ConfirmPrompt(Protocol):
    """Yes/no confirmation shown before destructive operations."""

    def __call__(self, message: str, *, title: str) -> bool: ...


@runtime_checkable
class ViewerControls(Protocol):
    """Control surface of the single-image viewer."""

    @property
    def current_path(self) -> Optional[str]: ...

    def open(self, path: str) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class ImageSource(Protocol):
    """Enumerates the images of a directory."""

    def list_images(self, directory: Path) -> Iterable[ImageEntry]: ...


@runtime_checkable
class ImageRemover(Protocol):
    """Moves an image file out of the browsed directory (e.g. to the trash)."""

    def __call__(self, path: str) -> None: ...


__all__ = ["ConfirmPrompt", "ViewerControls", "ImageSource", "ImageRemover"]
