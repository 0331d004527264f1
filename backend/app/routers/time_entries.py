"""Router exposing tracked time."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import TimeEntryService
from .validation import ensure_date_bounds

router = APIRouter()


@router.get("/", response_model=schemas.TimeEntryListResponse)
def list_time_entries(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    client_id: Optional[str] = Query(None, description="Filter by client"),
    project_name: Optional[str] = Query(None, description="Filter by project"),
    start_date: Optional[date] = Query(None, description="Return entries started on or after this date"),
    end_date: Optional[date] = Query(None, description="Return entries started on or before this date"),
    completed_only: bool = Query(False, description="Skip entries whose timer is still running"),
) -> schemas.TimeEntryListResponse:
    ensure_date_bounds(start_date, end_date)

    items, total = TimeEntryService.list_time_entries(
        db,
        skip=skip,
        limit=limit,
        client_id=client_id,
        project_name=project_name,
        start_date=start_date,
        end_date=end_date,
        completed_only=completed_only,
    )
    return schemas.TimeEntryListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("/", response_model=schemas.TimeEntryRead, status_code=status.HTTP_201_CREATED)
def create_time_entry(
    entry_in: schemas.TimeEntryCreate, db: Session = Depends(get_db)
) -> schemas.TimeEntryRead:
    return TimeEntryService.create_time_entry(db, entry_in)


@router.get("/{entry_id}", response_model=schemas.TimeEntryRead)
def get_time_entry(entry_id: str, db: Session = Depends(get_db)) -> schemas.TimeEntryRead:
    entry = TimeEntryService.get_time_entry(db, entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time entry not found")
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_entry(entry_id: str, db: Session = Depends(get_db)) -> None:
    entry = TimeEntryService.get_time_entry(db, entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time entry not found")
    TimeEntryService.delete_time_entry(db, entry)
