"""Router exposing dashboard analytics."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import AnalyticsService, SqlRecordRepository
from ..services.report_records import ComparisonKind, PeriodRange

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.get("/overview", response_model=schemas.AnalyticsOverviewResponse)
def get_overview(
    period: PeriodRange = Query(PeriodRange.MONTH, description="Rolling period to analyse"),
    db: Session = Depends(get_db),
) -> schemas.AnalyticsOverviewResponse:
    if period == PeriodRange.CUSTOM:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Custom ranges are only available for reports",
        )
    try:
        payload = AnalyticsService.overview(SqlRecordRepository(db), period)
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to load analytics overview", exc_info=exc, extra={"period": period.value})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load analytics data",
        ) from exc
    return schemas.AnalyticsOverviewResponse(**payload)


@router.get("/comparison", response_model=schemas.ComparisonResponse)
def get_comparison(
    kind: ComparisonKind = Query(ComparisonKind.MONTH, description="Calendar unit to compare"),
    db: Session = Depends(get_db),
) -> schemas.ComparisonResponse:
    try:
        payload = AnalyticsService.comparison(SqlRecordRepository(db), kind)
    except SQLAlchemyError as exc:
        LOGGER.exception("Failed to load period comparison", exc_info=exc, extra={"kind": kind.value})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load comparison data",
        ) from exc
    return schemas.ComparisonResponse(**payload)
