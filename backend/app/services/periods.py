"""Resolve symbolic period selectors into concrete date ranges."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from .report_records import ComparisonKind, Period, PeriodRange

LOGGER = logging.getLogger(__name__)

ONE_TICK = timedelta(microseconds=1)

_RANGE_LABELS = {
    PeriodRange.TODAY: "Today",
    PeriodRange.WEEK: "Last 7 Days",
    PeriodRange.MONTH: "Last Month",
    PeriodRange.QUARTER: "Last Quarter",
    PeriodRange.YEAR: "Last Year",
    PeriodRange.CUSTOM: "Custom Range",
}

_COMPARISON_LABELS = {
    ComparisonKind.WEEK: ("This Week", "Last Week"),
    ComparisonKind.MONTH: ("This Month", "Last Month"),
    ComparisonKind.QUARTER: ("This Quarter", "Last Quarter"),
    ComparisonKind.YEAR: ("This Year", "Last Year"),
}


def current_moment() -> datetime:
    return datetime.now()


def _naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _as_start(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _naive(value)
    return datetime.combine(value, time.min)


def _as_end(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _naive(value)
    return datetime.combine(value, time.max)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole calendar months, clamping the day to the month's end."""

    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_period(
    range_name: PeriodRange | str,
    now: Optional[datetime] = None,
    custom_start: Optional[date | datetime] = None,
    custom_end: Optional[date | datetime] = None,
) -> Period:
    """Return the concrete period a dashboard selector refers to.

    Rolling ranges end at ``now``. ``custom`` uses the supplied bounds and
    falls back to ``now`` for a missing one; a date-only end bound covers the
    whole day. An unrecognized selector yields the empty ``now..now`` period.
    """

    now = _naive(now or current_moment())
    try:
        period_range = PeriodRange(range_name)
    except ValueError:
        LOGGER.warning("Unrecognized period range %r; using an empty period ending now", range_name)
        return Period(label=str(range_name), start=now, end=now)

    label = _RANGE_LABELS[period_range]
    if period_range == PeriodRange.TODAY:
        return Period(label=label, start=_start_of_day(now), end=now)
    if period_range == PeriodRange.WEEK:
        return Period(label=label, start=now - timedelta(days=7), end=now)
    if period_range == PeriodRange.MONTH:
        return Period(label=label, start=shift_months(now, -1), end=now)
    if period_range == PeriodRange.QUARTER:
        return Period(label=label, start=shift_months(now, -3), end=now)
    if period_range == PeriodRange.YEAR:
        return Period(label=label, start=shift_months(now, -12), end=now)

    start = _as_start(custom_start) if custom_start is not None else now
    end = _as_end(custom_end) if custom_end is not None else now
    return Period(label=label, start=start, end=end)


def previous_period(period: Period) -> Period:
    """Return the period of identical length that ends right before ``period``."""

    length = period.end - period.start
    end = period.start - ONE_TICK
    return Period(label=f"Before {period.label}", start=end - length, end=end)


def resolve_comparison_periods(
    kind: ComparisonKind | str, now: Optional[datetime] = None
) -> Tuple[Period, Period]:
    """Return ``(current, previous)`` calendar periods for the comparison view.

    The current period starts at the beginning of the calendar unit that
    contains ``now`` (weeks start on Sunday) and ends at ``now``; the previous
    period covers the whole preceding unit.
    """

    now = _naive(now or current_moment())
    comparison = ComparisonKind(kind)
    today = _start_of_day(now)

    if comparison == ComparisonKind.WEEK:
        current_start = today - timedelta(days=(today.weekday() + 1) % 7)
        previous_start = current_start - timedelta(days=7)
    elif comparison == ComparisonKind.MONTH:
        current_start = today.replace(day=1)
        previous_start = shift_months(current_start, -1)
    elif comparison == ComparisonKind.QUARTER:
        quarter_month = (today.month - 1) // 3 * 3 + 1
        current_start = today.replace(month=quarter_month, day=1)
        previous_start = shift_months(current_start, -3)
    else:
        current_start = today.replace(month=1, day=1)
        previous_start = current_start.replace(year=current_start.year - 1)

    current_label, previous_label = _COMPARISON_LABELS[comparison]
    current = Period(label=current_label, start=current_start, end=now)
    previous = Period(label=previous_label, start=previous_start, end=current_start - ONE_TICK)
    return current, previous
