"""Router exposing client operations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import ClientService

router = APIRouter()


@router.get("/", response_model=schemas.ClientListResponse)
def list_clients(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of records to return"),
    search: Optional[str] = Query(None, description="Filter clients by name"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
) -> schemas.ClientListResponse:
    """Retrieve clients ordered by name."""

    items, total = ClientService.list_clients(
        db,
        skip=skip,
        limit=limit,
        search=search,
        status=status_filter,
    )
    return schemas.ClientListResponse(items=items, total=total, limit=limit, skip=skip)


@router.post("/", response_model=schemas.ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(client_in: schemas.ClientCreate, db: Session = Depends(get_db)) -> schemas.ClientRead:
    return ClientService.create_client(db, client_in)


@router.get("/{client_id}", response_model=schemas.ClientRead)
def get_client(client_id: str, db: Session = Depends(get_db)) -> schemas.ClientRead:
    client = ClientService.get_client(db, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: str, db: Session = Depends(get_db)) -> None:
    client = ClientService.get_client(db, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    ClientService.delete_client(db, client)
