"""Image enumeration models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ImageEntry(BaseModel):
    """An image listed in the browsed directory.

    Attributes:
        path: Identifier of the image (a filesystem path string).
        size_bytes: File size, when the enumerator provides it.
        created_at: Creation time, when the enumerator provides it.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    size_bytes: Optional[int] = None
    created_at: Optional[datetime] = None


__all__ = ["ImageEntry"]
