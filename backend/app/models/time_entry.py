"""SQLAlchemy model definitions for tracked time."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)

from ..database import Base
from ..db_types import Identifier, new_identifier


class TimeEntry(Base):
    """A block of tracked work time, optionally billed to a client."""

    __tablename__ = "time_entries"
    __table_args__ = (
        CheckConstraint("duration_seconds >= 0", name="ck_time_entries_duration_non_negative"),
    )

    id = Column("time_entry_id", Identifier(), primary_key=True, default=new_identifier)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration = Column("duration_seconds", Integer, nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    client_id = Column(Identifier(), nullable=True)
    project_name = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    is_billable = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index("time_entries_start_time_idx", TimeEntry.start_time)
