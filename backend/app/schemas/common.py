"""Pieces shared by the record schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Strip optional free text, treating whitespace-only input as missing."""

    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def to_naive_local(value: Optional[datetime]) -> Optional[datetime]:
    """Convert offset-aware timestamps to naive local time, the form records are stored in."""

    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a record listing plus the size of the full result."""

    items: List[T]
    total: int = Field(..., ge=0, description="Records matching the filters")
    limit: int = Field(..., ge=1)
    skip: int = Field(..., ge=0)
