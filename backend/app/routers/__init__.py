"""Routers package."""

from .analytics import router as analytics_router
from .clients import router as clients_router
from .earnings import router as earnings_router
from .expenses import router as expenses_router
from .platforms import router as platforms_router
from .reports import router as reports_router
from .time_entries import router as time_entries_router

__all__ = [
    "analytics_router",
    "clients_router",
    "earnings_router",
    "expenses_router",
    "platforms_router",
    "reports_router",
    "time_entries_router",
]
