from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PaginatedResponse, blank_to_none


class ExpenseBase(BaseModel):
    date: dt.date = Field(..., description="Date when the expense occurred")
    category: str = Field(..., min_length=1, max_length=100, description="Category of the expense")
    description: Optional[str] = Field(default=None, description="Detailed description of the expense")
    amount: Decimal = Field(..., ge=0, description="Monetary value of the expense")

    @field_validator("category")
    @classmethod
    def _strip_category(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("category cannot be blank")
        return stripped

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class ExpenseCreate(ExpenseBase):
    """Schema used to create new expenses."""

    id: Optional[str] = Field(default=None, max_length=64)


class ExpenseRead(ExpenseBase):
    """Schema representing stored expenses."""

    id: str
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseListResponse(PaginatedResponse[ExpenseRead]):
    """Paginated expense listing."""

    pass
