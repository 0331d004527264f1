"""Router exposing earning operations."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import EarningService
from .validation import ensure_amount_bounds, ensure_date_bounds

router = APIRouter()


@router.get("/", response_model=schemas.EarningListResponse)
def list_earnings(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0, description="Number of earnings to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of earnings to return"),
    platform_id: Optional[str] = Query(None, description="Filter by platform"),
    client_id: Optional[str] = Query(None, description="Filter by client"),
    category: Optional[str] = Query(None, description="Filter by earning category"),
    start_date: Optional[date] = Query(None, description="Return earnings on or after this date"),
    end_date: Optional[date] = Query(None, description="Return earnings on or before this date"),
    min_amount: Optional[Decimal] = Query(None, ge=0, description="Minimum earning amount"),
    max_amount: Optional[Decimal] = Query(None, ge=0, description="Maximum earning amount"),
) -> schemas.EarningListResponse:
    """Return earnings with pagination and filtering."""

    ensure_date_bounds(start_date, end_date)
    ensure_amount_bounds(min_amount, max_amount)

    items, total = EarningService.list_earnings(
        db,
        skip=skip,
        limit=limit,
        platform_id=platform_id,
        client_id=client_id,
        category=category,
        start_date=start_date,
        end_date=end_date,
        min_amount=min_amount,
        max_amount=max_amount,
    )
    return schemas.EarningListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("/", response_model=schemas.EarningRead, status_code=status.HTTP_201_CREATED)
def create_earning(earning_in: schemas.EarningCreate, db: Session = Depends(get_db)) -> schemas.EarningRead:
    return EarningService.create_earning(db, earning_in)


@router.get("/{earning_id}", response_model=schemas.EarningRead)
def get_earning(earning_id: str, db: Session = Depends(get_db)) -> schemas.EarningRead:
    earning = EarningService.get_earning(db, earning_id)
    if earning is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Earning not found")
    return earning


@router.delete("/{earning_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_earning(earning_id: str, db: Session = Depends(get_db)) -> None:
    earning = EarningService.get_earning(db, earning_id)
    if earning is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Earning not found")
    EarningService.delete_earning(db, earning)
