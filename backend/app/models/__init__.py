"""Expose SQLAlchemy models for convenient imports."""

from .client import ACTIVE_CLIENT_STATUS, Client, Platform
from .earning import Earning
from .expense import Expense
from .report_template import ReportTemplate
from .time_entry import TimeEntry

__all__ = [
    "ACTIVE_CLIENT_STATUS",
    "Client",
    "Earning",
    "Expense",
    "Platform",
    "ReportTemplate",
    "TimeEntry",
]
