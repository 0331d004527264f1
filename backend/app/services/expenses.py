"""Business logic for expenses."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from .ledger_queries import filter_ledger, paginate


class ExpenseService:
    """Stores the spending the finance reports subtract from earnings."""

    @staticmethod
    def list_expenses(
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        category: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
    ) -> Tuple[Iterable[models.Expense], int]:
        query = filter_ledger(
            db.query(models.Expense),
            models.Expense,
            category=category,
            start_date=start_date,
            end_date=end_date,
            min_amount=min_amount,
            max_amount=max_amount,
        )
        if search:
            query = query.filter(
                func.lower(models.Expense.description).like(f"%{search.strip().lower()}%")
            )
        return paginate(
            query,
            (models.Expense.date.desc(), models.Expense.created_at.desc()),
            skip=skip,
            limit=limit,
        )

    @staticmethod
    def list_categories(db: Session) -> list[str]:
        """Distinct expense categories, alphabetically."""

        rows = db.query(models.Expense.category).distinct().order_by(models.Expense.category).all()
        return [category for (category,) in rows]

    @staticmethod
    def create_expense(db: Session, data: schemas.ExpenseCreate) -> models.Expense:
        expense = models.Expense(**data.model_dump(exclude_none=True))
        db.add(expense)
        db.commit()
        db.refresh(expense)
        return expense

    @staticmethod
    def get_expense(db: Session, expense_id: str) -> Optional[models.Expense]:
        return db.get(models.Expense, expense_id)

    @staticmethod
    def delete_expense(db: Session, expense: models.Expense) -> None:
        db.delete(expense)
        db.commit()
