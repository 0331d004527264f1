"""Business logic related to clients and earning platforms."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from .ledger_queries import paginate


class ClientService:
    """Encapsulates CRUD operations for clients."""

    @staticmethod
    def list_clients(
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[Iterable[models.Client], int]:
        query = db.query(models.Client)

        if search:
            normalized = f"%{search.lower()}%"
            query = query.filter(func.lower(models.Client.name).like(normalized))

        if status:
            query = query.filter(func.lower(models.Client.status) == status.strip().lower())

        return paginate(query, (models.Client.name,), skip=skip, limit=limit)

    @staticmethod
    def create_client(db: Session, data: schemas.ClientCreate) -> models.Client:
        client = models.Client(**data.model_dump(exclude_none=True))
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[models.Client]:
        return db.query(models.Client).filter(models.Client.id == client_id).first()

    @staticmethod
    def delete_client(db: Session, client: models.Client) -> None:
        # Earnings keep their client_id; reports render it as Unknown.
        db.delete(client)
        db.commit()


class PlatformService:
    """CRUD operations for the platforms earnings are attributed to."""

    @staticmethod
    def list_platforms(
        db: Session, *, skip: int = 0, limit: int = 100
    ) -> Tuple[Iterable[models.Platform], int]:
        query = db.query(models.Platform)
        return paginate(query, (models.Platform.name,), skip=skip, limit=limit)

    @staticmethod
    def create_platform(db: Session, data: schemas.PlatformCreate) -> models.Platform:
        platform = models.Platform(**data.model_dump(exclude_none=True))
        db.add(platform)
        db.commit()
        db.refresh(platform)
        return platform

    @staticmethod
    def get_platform(db: Session, platform_id: str) -> Optional[models.Platform]:
        return db.query(models.Platform).filter(models.Platform.id == platform_id).first()

    @staticmethod
    def delete_platform(db: Session, platform: models.Platform) -> None:
        db.delete(platform)
        db.commit()
