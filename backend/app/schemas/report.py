"""Schemas for report templates and generated reports."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..services.report_records import ChartType, GroupBy, PeriodRange, ReportType


def _clean_name(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("name cannot be blank")
    return stripped


class ReportFilters(BaseModel):
    """Optional constraints applied to the records a report aggregates."""

    platforms: List[str] = Field(default_factory=list)
    clients: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    min_amount: Optional[Decimal] = Field(default=None, ge=0)
    max_amount: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("platforms", "clients", "projects", "categories")
    @classmethod
    def _drop_blank(cls, values: List[str]) -> List[str]:
        return [value.strip() for value in values if value and value.strip()]

    @model_validator(mode="after")
    def validate_amounts(self):
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValueError("min_amount cannot be greater than max_amount")
        return self


class ReportTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", description="Short explanation shown next to the template")
    report_type: ReportType = Field(..., description="Record kind the report aggregates")
    date_range: PeriodRange = Field(PeriodRange.MONTH, description="Period selector")
    custom_start_date: Optional[date] = None
    custom_end_date: Optional[date] = None
    metrics: List[str] = Field(default_factory=list)
    group_by: GroupBy = GroupBy.DAY
    chart_type: ChartType = ChartType.BAR
    filters: ReportFilters = Field(default_factory=ReportFilters)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("filters", mode="before")
    @classmethod
    def _default_filters(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def validate_custom_range(self):
        if (
            self.custom_start_date is not None
            and self.custom_end_date is not None
            and self.custom_start_date > self.custom_end_date
        ):
            raise ValueError("custom_start_date cannot be after custom_end_date")
        return self


class ReportTemplateCreate(ReportTemplateBase):
    """Schema used to save a new template."""

    id: Optional[str] = Field(default=None, max_length=64)


class ReportTemplateUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    report_type: Optional[ReportType] = None
    date_range: Optional[PeriodRange] = None
    custom_start_date: Optional[date] = None
    custom_end_date: Optional[date] = None
    metrics: Optional[List[str]] = None
    group_by: Optional[GroupBy] = None
    chart_type: Optional[ChartType] = None
    filters: Optional[ReportFilters] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_name(value)


class ReportTemplateRead(ReportTemplateBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PeriodRead(BaseModel):
    label: str
    start: datetime
    end: datetime


class ReportSummaryRead(BaseModel):
    total: Decimal
    count: int = Field(..., ge=0)
    average: Decimal
    highest: Decimal
    lowest: Decimal
    growth: Optional[Decimal] = None


class ChartPoint(BaseModel):
    name: str
    value: Decimal
    count: int = Field(..., ge=0)
    average: Decimal


class ReportDataResponse(BaseModel):
    """Generated report: summary cards, chart series and the matching rows."""

    template_id: Optional[str] = None
    template_name: str
    generated_at: datetime
    period: PeriodRead
    previous_period: Optional[PeriodRead] = None
    summary: ReportSummaryRead
    chart_data: List[ChartPoint] = Field(default_factory=list)
    table_data: List[dict[str, Any]] = Field(default_factory=list)
