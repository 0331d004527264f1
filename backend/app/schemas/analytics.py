from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .report import PeriodRead


class OverviewTotals(BaseModel):
    total_earnings: Decimal
    total_expenses: Decimal
    net_income: Decimal
    profit_margin: Decimal
    avg_daily_earnings: Decimal
    avg_hourly_rate: Decimal
    total_hours: Decimal
    active_clients: int = Field(..., ge=0)


class DailyTrendPoint(BaseModel):
    date: str
    label: str
    earnings: Decimal


class TimeSeriesPoint(BaseModel):
    date: str
    amount: Decimal
    hours: Decimal


class CategoryBreakdownRow(BaseModel):
    category: str
    amount: Decimal
    count: int = Field(..., ge=0)


class ClientDistributionRow(BaseModel):
    name: str
    value: Decimal


class HourlyPerformanceRow(BaseModel):
    hour: str
    earnings: Decimal
    hours: Decimal


class WeekdayComparisonRow(BaseModel):
    day: str
    earnings: Decimal
    expenses: Decimal
    net: Decimal


class MonthlyGrowthRow(BaseModel):
    period_key: str
    month: str
    earnings: Decimal
    expenses: Decimal
    net: Decimal


class PlatformPerformanceRow(BaseModel):
    name: str
    earnings: Decimal
    count: int = Field(..., ge=0)
    average: Decimal


class PlatformBreakdownRow(BaseModel):
    platform: str
    amount: Decimal
    percentage: Decimal
    color: Optional[str] = None


class AnalyticsOverviewResponse(BaseModel):
    """Everything the analytics dashboard renders for one period."""

    period: PeriodRead
    totals: OverviewTotals
    trends: List[DailyTrendPoint] = Field(default_factory=list)
    time_series: List[TimeSeriesPoint] = Field(default_factory=list)
    category_breakdown: List[CategoryBreakdownRow] = Field(default_factory=list)
    client_distribution: List[ClientDistributionRow] = Field(default_factory=list)
    hourly_performance: List[HourlyPerformanceRow] = Field(default_factory=list)
    weekday_comparison: List[WeekdayComparisonRow] = Field(default_factory=list)
    monthly_growth: List[MonthlyGrowthRow] = Field(default_factory=list)
    platform_performance: List[PlatformPerformanceRow] = Field(default_factory=list)
    platform_breakdown: List[PlatformBreakdownRow] = Field(default_factory=list)


class PeriodMetrics(BaseModel):
    total_earnings: Decimal
    total_hours: Decimal
    avg_hourly_rate: Decimal
    transaction_count: int = Field(..., ge=0)
    top_platform: str
    top_platform_amount: Decimal
    avg_per_day: Decimal
    avg_per_transaction: Decimal


class MetricChangeRead(BaseModel):
    percent: Decimal
    is_positive: bool


class PeriodMetricsRead(BaseModel):
    period: PeriodRead
    metrics: PeriodMetrics


class ComparisonResponse(BaseModel):
    """Side-by-side metrics of the current and previous calendar period."""

    kind: str
    current: PeriodMetricsRead
    previous: PeriodMetricsRead
    changes: Dict[str, MetricChangeRead] = Field(default_factory=dict)
