"""Expose the finance reporting FastAPI app and enforce local development CORS defaults."""

import logging
import os
import re
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .database import read_bool_env
from .migrations import run_database_migrations
from .routers import (
    analytics_router,
    clients_router,
    earnings_router,
    expenses_router,
    platforms_router,
    reports_router,
    time_entries_router,
)

LOGGER = logging.getLogger(__name__)

RUN_MIGRATIONS_ENV = "RUN_MIGRATIONS_ON_STARTUP"
ALLOWED_ORIGINS_ENV = "BACKEND_ALLOWED_ORIGINS"

# Vite dev and preview servers used by the dashboard frontend.
LOCAL_DEVELOPMENT_ORIGINS = {"http://localhost:5173", "http://localhost:5174"}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = LOCAL_DEVELOPMENT_ORIGINS | {
    f"http://{host}:{port}"
    for host in ("localhost", "127.0.0.1")
    for port in (3000, 4173, 5173, 5174)
}


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _clean_origins(origins: Iterable[str]) -> list[str]:
    return sorted({origin.strip().rstrip("/") for origin in origins if origin.strip()})


def _load_allowed_origins_from_env() -> list[str]:
    return _clean_origins(_split_raw_origins(os.getenv(ALLOWED_ORIGINS_ENV, "")))


def _resolve_allowed_origins() -> list[str]:
    configured = _load_allowed_origins_from_env() or DEFAULT_ALLOWED_ORIGINS
    # The dashboard dev servers stay allowed even when the environment omits them.
    return _clean_origins([*configured, *LOCAL_DEVELOPMENT_ORIGINS])


def ensure_database_is_ready() -> None:
    if not read_bool_env(RUN_MIGRATIONS_ENV, True):
        LOGGER.info("Skipping database migrations (%s is off)", RUN_MIGRATIONS_ENV)
        return
    run_database_migrations()


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_database_is_ready()
    yield


app = FastAPI(title="Freelance Finance Reports API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(earnings_router, prefix="/earnings", tags=["earnings"])
app.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
app.include_router(time_entries_router, prefix="/time-entries", tags=["time-entries"])
app.include_router(clients_router, prefix="/clients", tags=["clients"])
app.include_router(platforms_router, prefix="/platforms", tags=["platforms"])
app.include_router(reports_router, prefix="/reports", tags=["reports"])
app.include_router(analytics_router, prefix="/analytics", tags=["analytics"])


@app.get("/", tags=["health"])
def read_root() -> dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}
