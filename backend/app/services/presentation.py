"""Reshape aggregated data into chart series and downloadable exports."""

from __future__ import annotations

import csv
import io
import json
import re
from calendar import month_abbr
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from .aggregation import group_records, total_amount
from .report_records import (
    UNKNOWN_KEY,
    ZERO,
    AggregationBucket,
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    GroupBy,
    HUNDRED,
    Period,
    PlatformRecord,
    TimeEntryRecord,
    safe_divide,
)

CENT = Decimal("0.01")
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
CSV_HEADER = "Name,Value,Count,Average"


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT)


def _weekday_index(moment: date) -> int:
    return (moment.weekday() + 1) % 7


def to_chart_points(buckets: Mapping[str, AggregationBucket]) -> list[dict[str, Any]]:
    return [
        {
            "name": key,
            "value": bucket.total,
            "count": bucket.count,
            "average": bucket.average,
        }
        for key, bucket in buckets.items()
    ]


def to_time_series(
    earnings: Iterable[EarningRecord], time_entries: Iterable[TimeEntryRecord] = ()
) -> list[dict[str, Any]]:
    """Daily earnings and tracked hours, oldest day first."""

    amounts: dict[date, Decimal] = {}
    hours: dict[date, Decimal] = {}
    for earning in earnings:
        amounts[earning.date] = amounts.get(earning.date, ZERO) + earning.amount
    for entry in time_entries:
        day = entry.start_time.date()
        hours[day] = hours.get(day, ZERO) + entry.hours

    return [
        {
            "date": day.isoformat(),
            "amount": amounts.get(day, ZERO),
            "hours": _round(hours.get(day, ZERO)),
        }
        for day in sorted(set(amounts) | set(hours))
    ]


def daily_trends(earnings: Iterable[EarningRecord], period: Period) -> list[dict[str, Any]]:
    """One row per calendar day of ``period``, days without earnings included."""

    totals: dict[date, Decimal] = {}
    day = period.start.date()
    while day <= period.end.date():
        totals[day] = ZERO
        day += timedelta(days=1)

    for earning in earnings:
        if earning.date in totals:
            totals[earning.date] += earning.amount

    return [
        {
            "date": day.isoformat(),
            "label": f"{month_abbr[day.month]} {day.day}",
            "earnings": _round(amount),
        }
        for day, amount in totals.items()
    ]


def hourly_performance(time_entries: Iterable[TimeEntryRecord]) -> list[dict[str, Any]]:
    earnings = [ZERO] * 24
    hours = [ZERO] * 24
    for entry in time_entries:
        hour = entry.start_time.hour
        earnings[hour] += entry.value
        hours[hour] += entry.hours
    return [
        {"hour": f"{hour}:00", "earnings": earnings[hour], "hours": _round(hours[hour])}
        for hour in range(24)
    ]


def weekday_comparison(
    earnings: Iterable[EarningRecord], expenses: Iterable[ExpenseRecord]
) -> list[dict[str, Any]]:
    income = [ZERO] * 7
    spent = [ZERO] * 7
    for earning in earnings:
        income[_weekday_index(earning.date)] += earning.amount
    for expense in expenses:
        spent[_weekday_index(expense.date)] += expense.amount
    return [
        {
            "day": name,
            "earnings": _round(income[index]),
            "expenses": _round(spent[index]),
            "net": _round(income[index] - spent[index]),
        }
        for index, name in enumerate(WEEKDAY_NAMES)
    ]


def monthly_growth(
    earnings: Iterable[EarningRecord],
    expenses: Iterable[ExpenseRecord],
    *,
    limit: int = 12,
) -> list[dict[str, Any]]:
    """Earnings, expenses and net per month for the most recent ``limit`` months with data."""

    months: dict[str, list[Decimal]] = {}
    for earning in earnings:
        key = f"{earning.date.year:04d}-{earning.date.month:02d}"
        months.setdefault(key, [ZERO, ZERO])[0] += earning.amount
    for expense in expenses:
        key = f"{expense.date.year:04d}-{expense.date.month:02d}"
        months.setdefault(key, [ZERO, ZERO])[1] += expense.amount

    recent = sorted(months)[-limit:] if limit > 0 else []
    rows = []
    for key in recent:
        income, spent = months[key]
        year, month = key.split("-")
        rows.append(
            {
                "period_key": key,
                "month": f"{month_abbr[int(month)]} {year[2:]}",
                "earnings": _round(income),
                "expenses": _round(spent),
                "net": _round(income - spent),
            }
        )
    return rows


def platform_breakdown(
    earnings: Sequence[EarningRecord], platforms: Iterable[PlatformRecord]
) -> list[dict[str, Any]]:
    """Earnings per platform with their share of the total, largest first."""

    lookup = {platform.id: platform for platform in platforms}
    grand_total = total_amount(earnings)
    rows = []
    for key, bucket in group_records(earnings, GroupBy.PROJECT).items():
        platform = lookup.get(key)
        rows.append(
            {
                "platform": platform.name if platform else UNKNOWN_KEY,
                "amount": bucket.total,
                "percentage": safe_divide(bucket.total * HUNDRED, grand_total),
                "color": platform.color if platform else None,
            }
        )
    rows.sort(key=lambda row: row["amount"], reverse=True)
    return rows


def platform_performance(
    earnings: Sequence[EarningRecord], platforms: Iterable[PlatformRecord] = ()
) -> list[dict[str, Any]]:
    lookup = {platform.id: platform.name for platform in platforms}
    return [
        {
            "name": lookup.get(key, key),
            "earnings": bucket.total,
            "count": bucket.count,
            "average": bucket.average,
        }
        for key, bucket in group_records(earnings, GroupBy.PROJECT).items()
    ]


def category_breakdown(expenses: Sequence[ExpenseRecord]) -> list[dict[str, Any]]:
    return [
        {"category": key, "amount": bucket.total, "count": bucket.count}
        for key, bucket in group_records(expenses, GroupBy.CATEGORY).items()
    ]


def client_distribution(
    earnings: Sequence[EarningRecord], clients: Iterable[ClientRecord]
) -> list[dict[str, Any]]:
    """Earnings per client name; ids that match no client are reported as ``Unknown``."""

    names = {client.id: client.name for client in clients}
    totals: dict[str, Decimal] = {}
    for key, bucket in group_records(earnings, GroupBy.CLIENT).items():
        name = names.get(key, UNKNOWN_KEY)
        totals[name] = totals.get(name, ZERO) + bucket.total
    return [{"name": name, "value": value} for name, value in totals.items()]


def _csv_number(value: Any) -> Any:
    if isinstance(value, Decimal):
        normalized = value.normalize()
        if normalized == normalized.to_integral_value():
            return int(normalized)
        return normalized
    return value


def export_csv(points: Iterable[Mapping[str, Any]]) -> str:
    """Render chart points as CSV with a quoted name column and 2-decimal averages."""

    buffer = io.StringIO()
    buffer.write(CSV_HEADER + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for point in points:
        writer.writerow(
            [
                str(point["name"]),
                _csv_number(point["value"]),
                int(point["count"]),
                Decimal(point["average"]).quantize(CENT),
            ]
        )
    return buffer.getvalue()


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def export_json(
    template_name: str,
    summary: Mapping[str, Any],
    points: Sequence[Mapping[str, Any]],
    generated_at: datetime,
) -> str:
    payload = {
        "template": template_name,
        "generatedAt": generated_at.isoformat(),
        "summary": dict(summary),
        "data": list(points),
    }
    return json.dumps(payload, indent=2, default=_json_default)


def export_filename(template_name: str, generated_at: datetime, export_format: str) -> str:
    stem = re.sub(r"\s+", "_", template_name.strip()) or "report"
    return f"{stem}_{generated_at.date().isoformat()}.{export_format}"
