"""SQLAlchemy model definitions for earnings."""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, Index, Numeric, String, Text, func

from ..database import Base
from ..db_types import Identifier, new_identifier


class Earning(Base):
    """Income logged by the user, manually or from a recurring template."""

    __tablename__ = "earnings"

    id = Column("earning_id", Identifier(), primary_key=True, default=new_identifier)
    date = Column("earned_on", Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    platform_id = Column(Identifier(), nullable=True)
    client_id = Column(Identifier(), nullable=True)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    hours = Column(Numeric(8, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index("earnings_earned_on_idx", Earning.date)
Index("earnings_platform_idx", Earning.platform_id)
Index("earnings_client_idx", Earning.client_id)
