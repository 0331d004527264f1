"""Query helpers shared by the record listing services."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query


def filter_ledger(
    query: Query,
    model: Any,
    *,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
) -> Query:
    """Narrow a query over a dated, amount-bearing model (earnings, expenses).

    Date and amount bounds are inclusive; the category comparison ignores case.
    """

    if category:
        query = query.filter(func.lower(model.category) == category.strip().lower())
    if start_date:
        query = query.filter(model.date >= start_date)
    if end_date:
        query = query.filter(model.date <= end_date)
    if min_amount is not None:
        query = query.filter(model.amount >= min_amount)
    if max_amount is not None:
        query = query.filter(model.amount <= max_amount)
    return query


def paginate(query: Query, order_by: Sequence[Any], *, skip: int, limit: int) -> Tuple[list, int]:
    total = query.count()
    items = query.order_by(*order_by).offset(max(skip, 0)).limit(max(limit, 1)).all()
    return items, total
