from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PaginatedResponse, blank_to_none


class EarningBase(BaseModel):
    date: dt.date = Field(..., description="Day the income was earned")
    amount: Decimal = Field(..., ge=0, description="Monetary value of the earning")
    platform_id: Optional[str] = Field(
        default=None, max_length=64, description="Platform the earning came from"
    )
    client_id: Optional[str] = Field(
        default=None, max_length=64, description="Client that paid the earning"
    )
    category: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    hours: Optional[Decimal] = Field(default=None, ge=0, description="Hours billed, if any")

    @field_validator("platform_id", "client_id", "category", "description")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class EarningCreate(EarningBase):
    """Schema used to log new earnings."""

    id: Optional[str] = Field(
        default=None, max_length=64, description="Client generated identifier to keep"
    )


class EarningRead(EarningBase):
    """Schema representing stored earnings."""

    id: str
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class EarningListResponse(PaginatedResponse[EarningRead]):
    """Paginated earning listing."""

    pass
