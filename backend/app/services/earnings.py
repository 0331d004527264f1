"""Business logic for earnings."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models, schemas
from .ledger_queries import filter_ledger, paginate


class EarningService:
    """Encapsulates CRUD operations for earnings."""

    @staticmethod
    def list_earnings(
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        platform_id: Optional[str] = None,
        client_id: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
    ) -> Tuple[Iterable[models.Earning], int]:
        query = filter_ledger(
            db.query(models.Earning),
            models.Earning,
            category=category,
            start_date=start_date,
            end_date=end_date,
            min_amount=min_amount,
            max_amount=max_amount,
        )
        if platform_id:
            query = query.filter(models.Earning.platform_id == platform_id)
        if client_id:
            query = query.filter(models.Earning.client_id == client_id)
        return paginate(
            query,
            (models.Earning.date.desc(), models.Earning.created_at.desc()),
            skip=skip,
            limit=limit,
        )

    @staticmethod
    def create_earning(db: Session, data: schemas.EarningCreate) -> models.Earning:
        earning = models.Earning(**data.model_dump(exclude_none=True))
        db.add(earning)
        db.commit()
        db.refresh(earning)
        return earning

    @staticmethod
    def get_earning(db: Session, earning_id: str) -> Optional[models.Earning]:
        return db.query(models.Earning).filter(models.Earning.id == earning_id).first()

    @staticmethod
    def delete_earning(db: Session, earning: models.Earning) -> None:
        db.delete(earning)
        db.commit()
