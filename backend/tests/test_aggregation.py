from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from backend.app.services.aggregation import (
    bucket_key,
    filter_records,
    format_day,
    group_records,
    growth_percentage,
    metric_change,
    summarize,
    total_amount,
    week_start,
)
from backend.app.services.periods import resolve_period
from backend.app.services.report_records import (
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    GroupBy,
    PeriodRange,
    TimeEntryRecord,
    safe_divide,
    to_decimal,
)

NOW = datetime(2024, 3, 31, 12, 0, 0)


def _earning(identifier: str, day: date, amount: str, **extra) -> EarningRecord:
    return EarningRecord(id=identifier, date=day, amount=Decimal(amount), **extra)


def test_month_grouped_by_day_matches_expected_buckets() -> None:
    earnings = [
        _earning("e1", date(2024, 3, 1), "100"),
        _earning("e2", date(2024, 3, 2), "200"),
    ]
    period = resolve_period(PeriodRange.MONTH, now=NOW)

    selected = filter_records(earnings, period)
    buckets = group_records(selected, GroupBy.DAY)
    summary = summarize(selected)

    assert list(buckets) == ["3/1/2024", "3/2/2024"]
    assert buckets["3/1/2024"].total == Decimal("100")
    assert buckets["3/1/2024"].count == 1
    assert buckets["3/1/2024"].average == Decimal("100")
    assert buckets["3/2/2024"].average == Decimal("200")
    assert summary.total == Decimal("300")
    assert summary.average == Decimal("150")
    assert summary.highest == Decimal("200")
    assert summary.lowest == Decimal("100")
    assert summary.growth is None


def test_period_bounds_are_inclusive() -> None:
    period = resolve_period(
        PeriodRange.CUSTOM, now=NOW, custom_start=date(2024, 3, 1), custom_end=date(2024, 3, 2)
    )
    earnings = [
        _earning("before", date(2024, 2, 29), "1"),
        _earning("first", date(2024, 3, 1), "2"),
        _earning("last", date(2024, 3, 2), "3"),
        _earning("after", date(2024, 3, 3), "4"),
    ]

    selected = filter_records(earnings, period)

    assert [record.id for record in selected] == ["first", "last"]


def test_filter_applies_amount_and_membership_constraints() -> None:
    period = resolve_period(PeriodRange.MONTH, now=NOW)
    earnings = [
        _earning("small", date(2024, 3, 5), "10", platform_id="p1"),
        _earning("match", date(2024, 3, 5), "50", platform_id="p1", client_id="c1"),
        _earning("other-platform", date(2024, 3, 5), "50", platform_id="p2"),
        _earning("large", date(2024, 3, 5), "500", platform_id="p1"),
    ]

    selected = filter_records(
        earnings,
        period,
        min_amount=Decimal("20"),
        max_amount=Decimal("100"),
        platform_ids={"p1"},
    )
    assert [record.id for record in selected] == ["match"]

    by_client = filter_records(earnings, period, client_ids=["c1"])
    assert [record.id for record in by_client] == ["match"]


def test_filter_keeps_records_without_moment_or_amount() -> None:
    period = resolve_period(PeriodRange.WEEK, now=NOW)
    client = ClientRecord(id="c1", name="Acme")
    running = TimeEntryRecord(id="t1", start_time=datetime(2024, 3, 30, 9, 0))

    selected = filter_records([client, running], period, min_amount=Decimal("1"))

    assert selected == [client, running]


def test_filter_does_not_mutate_input() -> None:
    period = resolve_period(PeriodRange.WEEK, now=NOW)
    earnings = [_earning("old", date(2023, 1, 1), "5"), _earning("new", date(2024, 3, 30), "5")]
    snapshot = list(earnings)

    filter_records(earnings, period)

    assert earnings == snapshot


def test_bucket_keys_per_dimension() -> None:
    earning = _earning("e1", date(2024, 3, 6), "10", platform_id="p1", client_id="c1", category="Design")
    expense = ExpenseRecord(id="x1", date=date(2024, 3, 6), amount=Decimal("5"))
    entry = TimeEntryRecord(id="t1", start_time=datetime(2024, 3, 6, 14, 30), duration=60)

    assert bucket_key(earning, GroupBy.DAY) == "3/6/2024"
    assert bucket_key(earning, GroupBy.WEEK) == "3/3/2024"
    assert bucket_key(earning, GroupBy.MONTH) == "2024-03"
    assert bucket_key(earning, GroupBy.PROJECT) == "p1"
    assert bucket_key(earning, GroupBy.CLIENT) == "c1"
    assert bucket_key(earning, GroupBy.CATEGORY) == "Design"
    assert bucket_key(expense, GroupBy.CATEGORY) == "Uncategorized"
    assert bucket_key(entry, GroupBy.HOUR) == "14:00"
    assert bucket_key(entry, GroupBy.PROJECT) == "Unknown"
    assert bucket_key(earning, "platform") == "All"


def test_week_start_is_sunday() -> None:
    assert week_start(datetime(2024, 3, 31)) == datetime(2024, 3, 31)
    assert week_start(datetime(2024, 3, 30)) == datetime(2024, 3, 24)
    assert format_day(datetime(2024, 12, 25)) == "12/25/2024"


def test_clients_group_by_name_and_time_entries_without_amount_count_zero() -> None:
    clients = [
        ClientRecord(id="c1", name="Acme", total_earnings=Decimal("300")),
        ClientRecord(id="c2", name="Acme", total_earnings=None),
    ]
    entries = [TimeEntryRecord(id="t1", start_time=NOW, duration=3600, project_name="Site")]

    client_buckets = group_records(clients, GroupBy.CLIENT)
    entry_buckets = group_records(entries, GroupBy.PROJECT)

    assert client_buckets["Acme"].total == Decimal("300")
    assert client_buckets["Acme"].count == 2
    assert client_buckets["Acme"].average == Decimal("150")
    assert entry_buckets["Site"].total == Decimal("0")


def test_grouping_is_order_independent() -> None:
    records = [
        _earning("a", date(2024, 3, 1), "10"),
        _earning("b", date(2024, 3, 2), "20"),
        _earning("c", date(2024, 3, 1), "30"),
    ]

    forward = group_records(records, GroupBy.DAY)
    backward = group_records(list(reversed(records)), GroupBy.DAY)

    assert {key: bucket.total for key, bucket in forward.items()} == {
        key: bucket.total for key, bucket in backward.items()
    }
    assert forward["3/1/2024"].average == Decimal("20")


def test_month_grouping_merges_records_from_the_same_month() -> None:
    earnings = [
        _earning("early", date(2024, 1, 5), "40"),
        _earning("late", date(2024, 1, 28), "60"),
    ]

    buckets = group_records(earnings, GroupBy.MONTH)

    assert list(buckets) == ["2024-01"]
    assert buckets["2024-01"].count == 2
    assert buckets["2024-01"].total == Decimal("100")
    assert buckets["2024-01"].average == Decimal("50")


def test_summary_extremes_do_not_depend_on_input_order() -> None:
    earnings = [
        _earning("a", date(2024, 3, 1), "10"),
        _earning("b", date(2024, 3, 2), "50"),
        _earning("c", date(2024, 3, 3), "5"),
    ]

    summary = summarize(earnings)

    assert summary.highest == Decimal("50")
    assert summary.lowest == Decimal("5")
    assert summary.count == 3


def test_pipeline_is_repeatable_on_the_same_input() -> None:
    period = resolve_period(PeriodRange.MONTH, now=NOW)
    records = [
        _earning("e1", date(2024, 3, 1), "100", category="Design"),
        _earning("e2", date(2024, 3, 15), "200"),
        ExpenseRecord(id="x1", date=date(2024, 3, 5), amount=Decimal("40"), category="Software"),
        _earning("outside", date(2023, 12, 1), "999"),
    ]
    snapshot = list(records)

    def run():
        selected = filter_records(records, period, min_amount=Decimal("0"))
        return group_records(selected, GroupBy.CATEGORY), summarize(selected, Decimal("100"))

    first = run()
    second = run()

    assert first == second
    assert list(first[0]) == list(second[0])
    assert records == snapshot


def test_empty_input_summarizes_to_zero() -> None:
    summary = summarize([], previous_total=Decimal("0"))

    assert summary.total == summary.average == summary.highest == summary.lowest == Decimal("0")
    assert summary.count == 0
    assert summary.growth == Decimal("0")
    assert group_records([], GroupBy.DAY) == {}
    assert total_amount([]) == Decimal("0")


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [
        (Decimal("150"), Decimal("100"), Decimal("50")),
        (Decimal("50"), Decimal("100"), Decimal("-50")),
        (Decimal("10"), Decimal("0"), Decimal("100")),
        (Decimal("0"), Decimal("0"), Decimal("0")),
    ],
)
def test_growth_percentage(current: Decimal, previous: Decimal, expected: Decimal) -> None:
    assert growth_percentage(current, previous) == expected


def test_metric_change_reports_magnitude_and_direction() -> None:
    down = metric_change(Decimal("75"), Decimal("100"))
    assert down.percent == Decimal("25")
    assert down.is_positive is False

    up = metric_change(3, 2)
    assert up.percent == Decimal("50")
    assert up.is_positive is True

    from_zero = metric_change(0, 0)
    assert from_zero.percent == Decimal("0")
    assert from_zero.is_positive is False


def test_numeric_helpers_guard_invalid_values() -> None:
    assert safe_divide(Decimal("10"), 0) == Decimal("0")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(" 12.50 ") == Decimal("12.50")
    with pytest.raises(ValueError):
        to_decimal("abc")
    with pytest.raises(ValueError):
        to_decimal(float("nan"))
    with pytest.raises(ValueError):
        to_decimal(True)
