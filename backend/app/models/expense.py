"""SQLAlchemy model definitions for expenses."""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, Index, Numeric, String, Text, func

from ..database import Base
from ..db_types import Identifier, new_identifier


class Expense(Base):
    """Represents a business expense recorded by the user."""

    __tablename__ = "expenses"

    id = Column("expense_id", Identifier(), primary_key=True, default=new_identifier)
    date = Column("spent_on", Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


Index("expenses_spent_on_idx", Expense.date)
Index("expenses_category_idx", Expense.category)
