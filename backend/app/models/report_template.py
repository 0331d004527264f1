"""SQLAlchemy model definitions for saved report templates."""

from __future__ import annotations

from sqlalchemy import JSON, Column, Date, DateTime, String, Text, func

from ..database import Base
from ..db_types import Identifier, new_identifier


class ReportTemplate(Base):
    """Saved configuration of the report builder."""

    __tablename__ = "report_templates"

    id = Column("template_id", Identifier(), primary_key=True, default=new_identifier)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    report_type = Column(String(20), nullable=False)
    date_range = Column(String(20), nullable=False)
    custom_start_date = Column(Date, nullable=True)
    custom_end_date = Column(Date, nullable=True)
    metrics = Column(JSON, nullable=False, default=list)
    group_by = Column(String(20), nullable=False)
    chart_type = Column(String(20), nullable=False)
    filters = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
