from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PaginatedResponse, blank_to_none


class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    status: str = Field("active", min_length=1, max_length=50)
    email: Optional[str] = Field(default=None, max_length=200)
    company: Optional[str] = Field(default=None, max_length=200)
    total_earnings: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("name", "status")
    @classmethod
    def _strip_strings(cls, value: str) -> str:
        return value.strip()

    @field_validator("email", "company")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ClientCreate(ClientBase):
    """Schema for creating a client."""

    id: Optional[str] = Field(default=None, max_length=64)


class ClientRead(ClientBase):
    """Schema for returning client data."""

    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClientListResponse(PaginatedResponse[ClientRead]):
    """Paginated client listing."""

    pass


class PlatformBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20, description="Chart colour, e.g. #14a800")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()


class PlatformCreate(PlatformBase):
    id: Optional[str] = Field(default=None, max_length=64)


class PlatformRead(PlatformBase):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlatformListResponse(PaginatedResponse[PlatformRead]):
    pass
