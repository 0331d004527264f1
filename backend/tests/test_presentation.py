from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

from backend.app.services.aggregation import group_records
from backend.app.services.periods import resolve_period
from backend.app.services.presentation import (
    category_breakdown,
    client_distribution,
    daily_trends,
    export_csv,
    export_filename,
    export_json,
    hourly_performance,
    monthly_growth,
    platform_breakdown,
    platform_performance,
    to_chart_points,
    to_time_series,
    weekday_comparison,
)
from backend.app.services.report_records import (
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    GroupBy,
    PeriodRange,
    PlatformRecord,
    TimeEntryRecord,
)


def _earnings() -> list[EarningRecord]:
    return [
        EarningRecord(id="e1", date=date(2024, 3, 1), amount=Decimal("100"), platform_id="p1", client_id="c1"),
        EarningRecord(id="e2", date=date(2024, 3, 2), amount=Decimal("300"), platform_id="p2", client_id="ghost"),
    ]


def test_chart_points_keep_bucket_order() -> None:
    points = to_chart_points(group_records(_earnings(), GroupBy.DAY))

    assert points == [
        {"name": "3/1/2024", "value": Decimal("100"), "count": 1, "average": Decimal("100")},
        {"name": "3/2/2024", "value": Decimal("300"), "count": 1, "average": Decimal("300")},
    ]


def test_time_series_merges_earnings_and_hours_by_day() -> None:
    entries = [
        TimeEntryRecord(id="t1", start_time=datetime(2024, 3, 2, 9, 0), duration=5400),
        TimeEntryRecord(id="t2", start_time=datetime(2024, 3, 3, 9, 0), duration=3600),
    ]

    series = to_time_series(_earnings(), entries)

    assert [row["date"] for row in series] == ["2024-03-01", "2024-03-02", "2024-03-03"]
    assert series[1] == {"date": "2024-03-02", "amount": Decimal("300"), "hours": Decimal("1.50")}
    assert series[2]["amount"] == Decimal("0")


def test_daily_trends_fill_empty_days() -> None:
    period = resolve_period(
        PeriodRange.CUSTOM, custom_start=date(2024, 3, 1), custom_end=date(2024, 3, 3)
    )

    trends = daily_trends(_earnings(), period)

    assert [row["label"] for row in trends] == ["Mar 1", "Mar 2", "Mar 3"]
    assert trends[2]["earnings"] == Decimal("0.00")


def test_hourly_and_weekday_views_cover_every_slot() -> None:
    entries = [
        TimeEntryRecord(
            id="t1",
            start_time=datetime(2024, 3, 4, 9, 15),
            duration=3600,
            total_amount=Decimal("80"),
        )
    ]
    expenses = [ExpenseRecord(id="x1", date=date(2024, 3, 1), amount=Decimal("40"))]

    hourly = hourly_performance(entries)
    weekdays = weekday_comparison(_earnings(), expenses)

    assert len(hourly) == 24
    assert hourly[9] == {"hour": "9:00", "earnings": Decimal("80"), "hours": Decimal("1.00")}
    assert [row["day"] for row in weekdays] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    # 2024-03-01 is a Friday and 2024-03-02 a Saturday.
    assert weekdays[5]["net"] == Decimal("60.00")
    assert weekdays[6]["earnings"] == Decimal("300.00")


def test_monthly_growth_keeps_latest_months() -> None:
    earnings = [
        EarningRecord(id=f"e{month}", date=date(2023, month, 1), amount=Decimal(month))
        for month in range(1, 13)
    ] + [EarningRecord(id="next", date=date(2024, 1, 5), amount=Decimal("5"))]

    rows = monthly_growth(earnings, [], limit=3)

    assert [row["month"] for row in rows] == ["Nov 23", "Dec 23", "Jan 24"]
    assert rows[-1]["net"] == Decimal("5.00")


def test_platform_views_resolve_names_and_shares() -> None:
    platforms = [PlatformRecord(id="p1", name="Upwork", color="#14a800")]

    breakdown = platform_breakdown(_earnings(), platforms)
    performance = platform_performance(_earnings(), platforms)

    assert breakdown[0]["platform"] == "Unknown"
    assert breakdown[0]["percentage"] == Decimal("75")
    assert breakdown[1] == {
        "platform": "Upwork",
        "amount": Decimal("100"),
        "percentage": Decimal("25"),
        "color": "#14a800",
    }
    assert [row["name"] for row in performance] == ["Upwork", "p2"]


def test_category_and_client_views() -> None:
    expenses = [
        ExpenseRecord(id="x1", date=date(2024, 3, 1), amount=Decimal("40"), category="Software"),
        ExpenseRecord(id="x2", date=date(2024, 3, 1), amount=Decimal("10")),
    ]
    clients = [ClientRecord(id="c1", name="Acme")]

    assert category_breakdown(expenses) == [
        {"category": "Software", "amount": Decimal("40"), "count": 1},
        {"category": "Uncategorized", "amount": Decimal("10"), "count": 1},
    ]
    assert client_distribution(_earnings(), clients) == [
        {"name": "Acme", "value": Decimal("100")},
        {"name": "Unknown", "value": Decimal("300")},
    ]


def test_csv_export_quotes_names_and_rounds_averages() -> None:
    points = [
        {"name": 'Big "Client"', "value": Decimal("100"), "count": 3, "average": Decimal("33.3333")},
        {"name": "3/2/2024", "value": Decimal("12.50"), "count": 1, "average": Decimal("12.5")},
        {"name": "Acme, Inc", "value": Decimal("0.50"), "count": 2, "average": Decimal("0.25")},
    ]

    content = export_csv(points)

    assert content.splitlines() == [
        "Name,Value,Count,Average",
        '"Big ""Client""",100,3,33.33',
        '"3/2/2024",12.5,1,12.50',
        '"Acme, Inc",0.5,2,0.25',
    ]


def test_json_export_and_filename() -> None:
    generated_at = datetime(2024, 3, 31, 12, 0)
    points = [{"name": "3/1/2024", "value": Decimal("100"), "count": 1, "average": Decimal("100")}]

    payload = json.loads(export_json("Monthly Earnings Report", {"total": Decimal("100.5")}, points, generated_at))

    assert payload["template"] == "Monthly Earnings Report"
    assert payload["generatedAt"] == "2024-03-31T12:00:00"
    assert payload["summary"] == {"total": 100.5}
    assert payload["data"][0]["value"] == 100
    assert export_filename("Monthly Earnings Report", generated_at, "csv") == (
        "Monthly_Earnings_Report_2024-03-31.csv"
    )
