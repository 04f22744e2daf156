"""Image enumeration for browsed directories."""

from .discovery import ImageScanner
from .models import ImageEntry

__all__ = ["ImageEntry", "ImageScanner"]
