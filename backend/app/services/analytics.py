"""Dashboard analytics computed from the record repository."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from .aggregation import filter_records, metric_change, total_amount
from .periods import current_moment, resolve_comparison_periods, resolve_period
from .presentation import (
    category_breakdown,
    client_distribution,
    daily_trends,
    hourly_performance,
    monthly_growth,
    platform_breakdown,
    platform_performance,
    to_time_series,
    weekday_comparison,
)
from .record_sources import RecordRepository
from .report_records import (
    HUNDRED,
    ZERO,
    ComparisonKind,
    Period,
    PeriodRange,
    safe_divide,
)

LOGGER = logging.getLogger(__name__)

NO_PLATFORM = "N/A"
COMPARED_METRICS = (
    "total_earnings",
    "total_hours",
    "avg_hourly_rate",
    "transaction_count",
    "avg_per_day",
    "avg_per_transaction",
)


class AnalyticsService:
    """Read-only analytics built on the reporting pipeline."""

    @staticmethod
    def overview(
        repository: RecordRepository,
        period_range: PeriodRange | str = PeriodRange.MONTH,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        period = resolve_period(period_range, now=now or current_moment())

        all_earnings = repository.earnings()
        all_expenses = repository.expenses()
        earnings = filter_records(all_earnings, period)
        expenses = filter_records(all_expenses, period)
        time_entries = filter_records(repository.time_entries(), period)
        clients = repository.clients()
        platforms = repository.platforms()

        total_earnings = total_amount(earnings)
        total_expenses = total_amount(expenses)
        net_income = total_earnings - total_expenses
        total_hours = sum((entry.hours for entry in time_entries), ZERO)

        totals = {
            "total_earnings": total_earnings,
            "total_expenses": total_expenses,
            "net_income": net_income,
            "profit_margin": safe_divide(net_income * HUNDRED, total_earnings)
            if total_earnings > ZERO
            else ZERO,
            "avg_daily_earnings": safe_divide(total_earnings, max(1, period.days)),
            "avg_hourly_rate": safe_divide(total_earnings, total_hours),
            "total_hours": total_hours.quantize(Decimal("0.01")),
            "active_clients": sum(1 for client in clients if client.is_active),
        }

        return {
            "period": period.as_dict(),
            "totals": totals,
            "trends": daily_trends(earnings, period),
            "time_series": to_time_series(earnings, time_entries),
            "category_breakdown": category_breakdown(expenses),
            "client_distribution": client_distribution(earnings, clients),
            "hourly_performance": hourly_performance(time_entries),
            "weekday_comparison": weekday_comparison(earnings, expenses),
            "monthly_growth": monthly_growth(all_earnings, all_expenses),
            "platform_performance": platform_performance(earnings, platforms),
            "platform_breakdown": platform_breakdown(earnings, platforms),
        }

    @staticmethod
    def period_metrics(repository: RecordRepository, period: Period) -> dict[str, Any]:
        """Metrics of one comparison period; only finished time entries count as hours."""

        earnings = filter_records(repository.earnings(), period)
        completed = [
            entry
            for entry in filter_records(repository.time_entries(), period)
            if entry.is_completed
        ]
        total_earnings = total_amount(earnings)
        total_hours = sum((entry.hours for entry in completed), ZERO)
        transaction_count = len(earnings)

        names = {platform.id: platform.name for platform in repository.platforms()}
        per_platform: dict[str, Decimal] = {}
        for earning in earnings:
            name = names.get(earning.platform_id or "")
            if name is None:
                continue
            per_platform[name] = per_platform.get(name, ZERO) + earning.amount

        top_platform, top_amount = NO_PLATFORM, ZERO
        if per_platform:
            top_platform, top_amount = max(per_platform.items(), key=lambda item: item[1])

        return {
            "total_earnings": total_earnings,
            "total_hours": total_hours,
            "avg_hourly_rate": safe_divide(total_earnings, total_hours),
            "transaction_count": transaction_count,
            "top_platform": top_platform,
            "top_platform_amount": top_amount,
            "avg_per_day": safe_divide(total_earnings, period.days),
            "avg_per_transaction": safe_divide(total_earnings, transaction_count),
        }

    @staticmethod
    def comparison(
        repository: RecordRepository,
        kind: ComparisonKind | str = ComparisonKind.MONTH,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        comparison_kind = ComparisonKind(kind)
        current, previous = resolve_comparison_periods(comparison_kind, now=now)
        current_metrics = AnalyticsService.period_metrics(repository, current)
        previous_metrics = AnalyticsService.period_metrics(repository, previous)

        changes = {}
        for name in COMPARED_METRICS:
            change = metric_change(current_metrics[name], previous_metrics[name])
            changes[name] = {"percent": change.percent, "is_positive": change.is_positive}

        LOGGER.debug(
            "Compared %s periods %s and %s", comparison_kind.value, current.label, previous.label
        )
        return {
            "kind": comparison_kind.value,
            "current": {"period": current.as_dict(), "metrics": current_metrics},
            "previous": {"period": previous.as_dict(), "metrics": previous_metrics},
            "changes": changes,
        }
