"""SQLAlchemy model definitions for clients and earning platforms."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Numeric, String, func

from ..database import Base
from ..db_types import Identifier, new_identifier

ACTIVE_CLIENT_STATUS = "active"


class Client(Base):
    """A customer the user works for."""

    __tablename__ = "clients"

    id = Column("client_id", Identifier(), primary_key=True, default=new_identifier)
    name = Column(String(200), nullable=False)
    status = Column(String(50), nullable=False, default=ACTIVE_CLIENT_STATUS)
    email = Column(String(200), nullable=True)
    company = Column(String(200), nullable=True)
    total_earnings = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Platform(Base):
    """Marketplace or channel an earning came from (Upwork, Fiverr, ...)."""

    __tablename__ = "platforms"

    id = Column("platform_id", Identifier(), primary_key=True, default=new_identifier)
    name = Column(String(100), nullable=False)
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
