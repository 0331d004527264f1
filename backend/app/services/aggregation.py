"""Filter, bucket and summarize report records.

All helpers are pure: they never mutate the records they receive and always
return fresh containers, so running the same pipeline twice over an unchanged
input yields identical output.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Mapping
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, TypeVar

from .report_records import (
    HUNDRED,
    UNCATEGORIZED_KEY,
    UNKNOWN_KEY,
    ZERO,
    AggregationBucket,
    GroupBy,
    MetricChange,
    Period,
    ReportRecord,
    ReportSummary,
    safe_divide,
    to_decimal,
)

RecordT = TypeVar("RecordT", bound=ReportRecord)

FALLBACK_GROUP_KEY = "All"


def _matches(candidate: Optional[str], allowed: Optional[Collection[str]]) -> bool:
    if not allowed:
        return True
    return candidate is not None and candidate in allowed


def filter_records(
    records: Iterable[RecordT],
    period: Period,
    *,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    platform_ids: Optional[Collection[str]] = None,
    client_ids: Optional[Collection[str]] = None,
    projects: Optional[Collection[str]] = None,
    categories: Optional[Collection[str]] = None,
) -> list[RecordT]:
    """Return the records inside ``period`` that satisfy the optional constraints.

    Both period bounds are inclusive. Records without a moment (clients) are
    never excluded by the period, and records without an amount are never
    excluded by the amount bounds.
    """

    selected: list[RecordT] = []
    for record in records:
        moment = record.moment
        if moment is not None and not period.contains(moment):
            continue
        amount = record.reported_amount
        if amount is not None:
            if min_amount is not None and amount < min_amount:
                continue
            if max_amount is not None and amount > max_amount:
                continue
        if not _matches(record.platform_key, platform_ids):
            continue
        if not _matches(record.client_key, client_ids):
            continue
        if not _matches(record.project_key, projects):
            continue
        if not _matches(record.category_key, categories):
            continue
        selected.append(record)
    return selected


def format_day(moment: datetime) -> str:
    """Render a day as ``M/D/YYYY`` (``3/1/2024``)."""

    return f"{moment.month}/{moment.day}/{moment.year}"


def week_start(moment: datetime) -> datetime:
    """Return the Sunday that starts the week containing ``moment``."""

    return moment - timedelta(days=(moment.weekday() + 1) % 7)


def _day_key(record: ReportRecord) -> str:
    moment = record.moment
    return format_day(moment) if moment is not None else UNKNOWN_KEY


def _week_key(record: ReportRecord) -> str:
    moment = record.moment
    return format_day(week_start(moment)) if moment is not None else UNKNOWN_KEY


def _month_key(record: ReportRecord) -> str:
    moment = record.moment
    return f"{moment.year:04d}-{moment.month:02d}" if moment is not None else UNKNOWN_KEY


def _hour_key(record: ReportRecord) -> str:
    moment = record.moment
    return f"{moment.hour}:00" if moment is not None else UNKNOWN_KEY


_KEY_BUILDERS: Mapping[GroupBy, Callable[[ReportRecord], str]] = {
    GroupBy.DAY: _day_key,
    GroupBy.WEEK: _week_key,
    GroupBy.MONTH: _month_key,
    GroupBy.HOUR: _hour_key,
    GroupBy.PROJECT: lambda record: record.project_key or UNKNOWN_KEY,
    GroupBy.CLIENT: lambda record: record.client_key or UNKNOWN_KEY,
    GroupBy.CATEGORY: lambda record: record.category_key or UNCATEGORIZED_KEY,
}


def bucket_key(record: ReportRecord, group_by: GroupBy | str) -> str:
    try:
        builder = _KEY_BUILDERS[GroupBy(group_by)]
    except ValueError:
        return FALLBACK_GROUP_KEY
    return builder(record)


def group_records(
    records: Iterable[ReportRecord], group_by: GroupBy | str
) -> dict[str, AggregationBucket]:
    """Bucket records by ``group_by`` and compute total, count and average per bucket.

    Totals and counts are accumulated first; averages are derived in a second
    pass so the result does not depend on input order. Buckets keep the order
    in which their key was first seen.
    """

    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for record in records:
        key = bucket_key(record, group_by)
        totals[key] = totals.get(key, ZERO) + record.value
        counts[key] = counts.get(key, 0) + 1

    return {
        key: AggregationBucket(
            key=key,
            total=total,
            count=counts[key],
            average=safe_divide(total, counts[key]),
        )
        for key, total in totals.items()
    }


def total_amount(records: Iterable[ReportRecord]) -> Decimal:
    return sum((record.value for record in records), ZERO)


def growth_percentage(current: Decimal | int | float, previous: Decimal | int | float) -> Decimal:
    """Percentage change from ``previous`` to ``current``.

    A zero baseline reports 100 when the current value is positive and 0
    otherwise.
    """

    current_value = to_decimal(current)
    previous_value = to_decimal(previous)
    if previous_value == ZERO:
        return HUNDRED if current_value > ZERO else ZERO
    return (current_value - previous_value) / previous_value * HUNDRED


def metric_change(current: Decimal | int | float, previous: Decimal | int | float) -> MetricChange:
    """Absolute percentage change plus direction, as shown on comparison cards."""

    growth = growth_percentage(current, previous)
    if to_decimal(previous) == ZERO:
        return MetricChange(percent=growth, is_positive=to_decimal(current) > ZERO)
    return MetricChange(percent=abs(growth), is_positive=growth >= ZERO)


def summarize(
    records: Iterable[ReportRecord], previous_total: Optional[Decimal] = None
) -> ReportSummary:
    amounts = [record.value for record in records]
    total = sum(amounts, ZERO)
    growth = growth_percentage(total, previous_total) if previous_total is not None else None
    if not amounts:
        return ReportSummary(
            total=ZERO, count=0, average=ZERO, highest=ZERO, lowest=ZERO, growth=growth
        )
    return ReportSummary(
        total=total,
        count=len(amounts),
        average=safe_divide(total, len(amounts)),
        highest=max(amounts),
        lowest=min(amounts),
        growth=growth,
    )
