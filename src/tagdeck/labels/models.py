"""Category and assignment data models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class Category(BaseModel):
    """A user-defined label that can be attached to images.

    Attributes:
        id: Opaque, stable identifier.
        name: Display name. Uniqueness is checked by callers, not enforced here.
        color: Display color, usually a ``#rrggbb`` string.
        mutually_exclusive_with: Ids of categories removed from an image when
            this category is assigned to it. Not symmetric unless the data is.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str
    name: str
    color: str = ""
    mutually_exclusive_with: List[str] = Field(
        default_factory=list, alias="mutuallyExclusiveWith"
    )

    @field_validator("mutually_exclusive_with", mode="before")
    @classmethod
    def _drop_malformed_ids(cls, value: object) -> list[str]:
        if not isinstance(value, (list, tuple, set, frozenset)):
            return []
        return [item for item in value if isinstance(item, str) and item]


class Assignment(BaseModel):
    """The fact that an image carries a category.

    Attributes:
        category_id: Id of the attached category.
        assigned_at: ISO-8601 timestamp of the attachment. Empty for
            assignments migrated from documents that did not record one.
    """

    model_config = ConfigDict(frozen=True)

    category_id: str
    assigned_at: str = Field(default_factory=utc_timestamp)


__all__ = ["Category", "Assignment", "utc_timestamp"]
