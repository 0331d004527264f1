"""Service layer encapsulating business logic for API routers."""

from .analytics import AnalyticsService
from .clients import ClientService, PlatformService
from .earnings import EarningService
from .expenses import ExpenseService
from .record_sources import (
    InMemoryRecordRepository,
    LocalStorageSnapshot,
    RecordRepository,
    SqlRecordRepository,
)
from .reports import (
    ReportData,
    ReportDefinition,
    ReportService,
    ReportServiceError,
    ReportTemplateNotFoundError,
)
from .time_entries import TimeEntryService

__all__ = [
    "AnalyticsService",
    "ClientService",
    "PlatformService",
    "EarningService",
    "ExpenseService",
    "InMemoryRecordRepository",
    "LocalStorageSnapshot",
    "RecordRepository",
    "SqlRecordRepository",
    "ReportData",
    "ReportDefinition",
    "ReportService",
    "ReportServiceError",
    "ReportTemplateNotFoundError",
    "TimeEntryService",
]
