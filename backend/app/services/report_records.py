"""Typed, immutable records consumed by the reporting pipeline.

Every record kind the pipeline can aggregate gets its own frozen dataclass.
The kind-specific questions the aggregation stages ask (when did it happen,
how much is it worth, which project/client/category does it belong to) are
answered once by the record type, so grouping and filtering never have to
probe field presence.
"""

from __future__ import annotations

import enum
import math
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, ClassVar, Optional

ZERO = Decimal("0")
HUNDRED = Decimal("100")
SECONDS_PER_HOUR = Decimal("3600")
UNKNOWN_KEY = "Unknown"
UNCATEGORIZED_KEY = "Uncategorized"


class RecordKind(str, enum.Enum):
    """Discriminator carried by every record."""

    EARNING = "earning"
    EXPENSE = "expense"
    TIME_ENTRY = "time_entry"
    CLIENT = "client"


class PeriodRange(str, enum.Enum):
    """Symbolic period selectors offered by the dashboards."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


class ComparisonKind(str, enum.Enum):
    """Calendar units available in the period comparison view."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class GroupBy(str, enum.Enum):
    """Keys a report can bucket its records by."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    PROJECT = "project"
    CLIENT = "client"
    CATEGORY = "category"
    HOUR = "hour"


class ReportType(str, enum.Enum):
    EARNINGS = "earnings"
    EXPENSES = "expenses"
    TIME = "time"
    CLIENTS = "clients"
    CUSTOM = "custom"


class ChartType(str, enum.Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    TABLE = "table"


class ExportFormat(str, enum.Enum):
    CSV = "csv"
    JSON = "json"


def to_decimal(value: Any) -> Decimal:
    """Convert numbers and numeric strings to ``Decimal`` without float noise."""

    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except ArithmeticError as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def safe_divide(numerator: Decimal, denominator: Decimal | int) -> Decimal:
    """Divide, returning zero instead of raising when the denominator is zero."""

    if not denominator:
        return ZERO
    return numerator / Decimal(denominator)


class ReportRecord:
    """Accessors shared by every record kind; subclasses override what applies."""

    kind: ClassVar[RecordKind]

    @property
    def moment(self) -> Optional[datetime]:
        return None

    @property
    def reported_amount(self) -> Optional[Decimal]:
        return None

    @property
    def value(self) -> Decimal:
        amount = self.reported_amount
        return amount if amount is not None else ZERO

    @property
    def platform_key(self) -> Optional[str]:
        return None

    @property
    def project_key(self) -> Optional[str]:
        return None

    @property
    def client_key(self) -> Optional[str]:
        return None

    @property
    def category_key(self) -> Optional[str]:
        return None

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        payload["kind"] = self.kind.value
        return payload


@dataclass(frozen=True)
class EarningRecord(ReportRecord):
    id: str
    date: date
    amount: Decimal
    platform_id: Optional[str] = None
    client_id: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[Decimal] = None

    kind: ClassVar[RecordKind] = RecordKind.EARNING

    @property
    def moment(self) -> datetime:
        return datetime.combine(self.date, time.min)

    @property
    def reported_amount(self) -> Decimal:
        return self.amount

    @property
    def platform_key(self) -> Optional[str]:
        return self.platform_id or None

    @property
    def project_key(self) -> Optional[str]:
        return self.platform_id or None

    @property
    def client_key(self) -> Optional[str]:
        return self.client_id or None

    @property
    def category_key(self) -> Optional[str]:
        return self.category or None


@dataclass(frozen=True)
class ExpenseRecord(ReportRecord):
    id: str
    date: date
    amount: Decimal
    category: Optional[str] = None
    description: Optional[str] = None

    kind: ClassVar[RecordKind] = RecordKind.EXPENSE

    @property
    def moment(self) -> datetime:
        return datetime.combine(self.date, time.min)

    @property
    def reported_amount(self) -> Decimal:
        return self.amount

    @property
    def category_key(self) -> Optional[str]:
        return self.category or None


@dataclass(frozen=True)
class TimeEntryRecord(ReportRecord):
    id: str
    start_time: datetime
    duration: int = 0
    end_time: Optional[datetime] = None
    total_amount: Optional[Decimal] = None
    client_id: Optional[str] = None
    project_name: Optional[str] = None
    description: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    is_billable: bool = True

    kind: ClassVar[RecordKind] = RecordKind.TIME_ENTRY

    @property
    def moment(self) -> datetime:
        return self.start_time

    @property
    def reported_amount(self) -> Optional[Decimal]:
        return self.total_amount

    @property
    def hours(self) -> Decimal:
        return Decimal(max(self.duration, 0)) / SECONDS_PER_HOUR

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def project_key(self) -> Optional[str]:
        return self.project_name or None

    @property
    def client_key(self) -> Optional[str]:
        return self.client_id or None


@dataclass(frozen=True)
class ClientRecord(ReportRecord):
    id: str
    name: str
    status: str = "active"
    email: Optional[str] = None
    company: Optional[str] = None
    total_earnings: Optional[Decimal] = None

    kind: ClassVar[RecordKind] = RecordKind.CLIENT

    @property
    def reported_amount(self) -> Optional[Decimal]:
        return self.total_earnings

    @property
    def client_key(self) -> Optional[str]:
        return self.name or None

    @property
    def is_active(self) -> bool:
        return (self.status or "").strip().lower() == "active"


@dataclass(frozen=True)
class PlatformRecord:
    """Lookup entry translating a ``platform_id`` into a display name."""

    id: str
    name: str
    color: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """Concrete, inclusive date range."""

    label: str
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days spanned, rounded up."""

        span = self.end - self.start
        if span <= timedelta(0):
            return 0
        return math.ceil(span / timedelta(days=1))

    def as_dict(self) -> dict[str, Any]:
        return {"label": self.label, "start": self.start, "end": self.end}


@dataclass(frozen=True)
class AggregationBucket:
    key: str
    total: Decimal
    count: int
    average: Decimal


@dataclass(frozen=True)
class ReportSummary:
    total: Decimal
    count: int
    average: Decimal
    highest: Decimal
    lowest: Decimal
    growth: Optional[Decimal] = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MetricChange:
    """Magnitude and direction of a metric between two periods."""

    percent: Decimal
    is_positive: bool
