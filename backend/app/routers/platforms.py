"""Router exposing earning platforms."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import PlatformService

router = APIRouter()


@router.get("/", response_model=schemas.PlatformListResponse)
def list_platforms(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> schemas.PlatformListResponse:
    items, total = PlatformService.list_platforms(db, skip=skip, limit=limit)
    return schemas.PlatformListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("/", response_model=schemas.PlatformRead, status_code=status.HTTP_201_CREATED)
def create_platform(
    platform_in: schemas.PlatformCreate, db: Session = Depends(get_db)
) -> schemas.PlatformRead:
    return PlatformService.create_platform(db, platform_in)


@router.get("/{platform_id}", response_model=schemas.PlatformRead)
def get_platform(platform_id: str, db: Session = Depends(get_db)) -> schemas.PlatformRead:
    platform = PlatformService.get_platform(db, platform_id)
    if platform is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Platform not found")
    return platform


@router.delete("/{platform_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_platform(platform_id: str, db: Session = Depends(get_db)) -> None:
    platform = PlatformService.get_platform(db, platform_id)
    if platform is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Platform not found")
    PlatformService.delete_platform(db, platform)
