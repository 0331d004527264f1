from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import PaginatedResponse, blank_to_none, to_naive_local


class TimeEntryBase(BaseModel):
    start_time: datetime = Field(..., description="When tracking started")
    end_time: Optional[datetime] = Field(
        default=None, description="When tracking stopped; empty while the timer runs"
    )
    duration: int = Field(0, ge=0, description="Tracked time in seconds")
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    client_id: Optional[str] = Field(default=None, max_length=64)
    project_name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    is_billable: bool = True

    @field_validator("client_id", "project_name", "description")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def _naive_local(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_local(value)

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time cannot be before start_time")
        return self


class TimeEntryCreate(TimeEntryBase):
    """Schema used to record tracked time."""

    id: Optional[str] = Field(default=None, max_length=64)


class TimeEntryRead(TimeEntryBase):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TimeEntryListResponse(PaginatedResponse[TimeEntryRead]):
    pass
