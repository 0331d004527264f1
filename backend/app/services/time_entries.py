"""Business logic for tracked time."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models, schemas
from .ledger_queries import paginate


class TimeEntryService:
    """CRUD operations for time entries."""

    @staticmethod
    def list_time_entries(
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[str] = None,
        project_name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        completed_only: bool = False,
    ) -> Tuple[Iterable[models.TimeEntry], int]:
        query = db.query(models.TimeEntry)

        if client_id:
            query = query.filter(models.TimeEntry.client_id == client_id)
        if project_name:
            query = query.filter(models.TimeEntry.project_name == project_name.strip())
        if start_date:
            query = query.filter(models.TimeEntry.start_time >= datetime.combine(start_date, time.min))
        if end_date:
            next_day = datetime.combine(end_date + timedelta(days=1), time.min)
            query = query.filter(models.TimeEntry.start_time < next_day)
        if completed_only:
            query = query.filter(models.TimeEntry.end_time.isnot(None))

        return paginate(query, (models.TimeEntry.start_time.desc(),), skip=skip, limit=limit)

    @staticmethod
    def create_time_entry(db: Session, data: schemas.TimeEntryCreate) -> models.TimeEntry:
        entry = models.TimeEntry(**data.model_dump(exclude_none=True))
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def get_time_entry(db: Session, entry_id: str) -> Optional[models.TimeEntry]:
        return db.query(models.TimeEntry).filter(models.TimeEntry.id == entry_id).first()

    @staticmethod
    def delete_time_entry(db: Session, entry: models.TimeEntry) -> None:
        db.delete(entry)
        db.commit()
