"""Expose Pydantic schemas for convenient imports."""

from .analytics import (
    AnalyticsOverviewResponse,
    CategoryBreakdownRow,
    ClientDistributionRow,
    ComparisonResponse,
    DailyTrendPoint,
    HourlyPerformanceRow,
    MetricChangeRead,
    MonthlyGrowthRow,
    OverviewTotals,
    PeriodMetrics,
    PeriodMetricsRead,
    PlatformBreakdownRow,
    PlatformPerformanceRow,
    TimeSeriesPoint,
    WeekdayComparisonRow,
)
from .client import (
    ClientBase,
    ClientCreate,
    ClientListResponse,
    ClientRead,
    PlatformBase,
    PlatformCreate,
    PlatformListResponse,
    PlatformRead,
)
from .common import PaginatedResponse
from .earning import EarningBase, EarningCreate, EarningListResponse, EarningRead
from .expense import ExpenseBase, ExpenseCreate, ExpenseListResponse, ExpenseRead
from .report import (
    ChartPoint,
    PeriodRead,
    ReportDataResponse,
    ReportFilters,
    ReportSummaryRead,
    ReportTemplateBase,
    ReportTemplateCreate,
    ReportTemplateRead,
    ReportTemplateUpdate,
)
from .time_entry import (
    TimeEntryBase,
    TimeEntryCreate,
    TimeEntryListResponse,
    TimeEntryRead,
)

__all__ = [
    "AnalyticsOverviewResponse",
    "CategoryBreakdownRow",
    "ClientDistributionRow",
    "ComparisonResponse",
    "DailyTrendPoint",
    "HourlyPerformanceRow",
    "MetricChangeRead",
    "MonthlyGrowthRow",
    "OverviewTotals",
    "PeriodMetrics",
    "PeriodMetricsRead",
    "PlatformBreakdownRow",
    "PlatformPerformanceRow",
    "TimeSeriesPoint",
    "WeekdayComparisonRow",
    "ClientBase",
    "ClientCreate",
    "ClientListResponse",
    "ClientRead",
    "PlatformBase",
    "PlatformCreate",
    "PlatformListResponse",
    "PlatformRead",
    "PaginatedResponse",
    "EarningBase",
    "EarningCreate",
    "EarningListResponse",
    "EarningRead",
    "ExpenseBase",
    "ExpenseCreate",
    "ExpenseListResponse",
    "ExpenseRead",
    "ChartPoint",
    "PeriodRead",
    "ReportDataResponse",
    "ReportFilters",
    "ReportSummaryRead",
    "ReportTemplateBase",
    "ReportTemplateCreate",
    "ReportTemplateRead",
    "ReportTemplateUpdate",
    "TimeEntryBase",
    "TimeEntryCreate",
    "TimeEntryListResponse",
    "TimeEntryRead",
]
