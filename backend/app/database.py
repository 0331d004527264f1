"""Database configuration for the reporting backend."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

_DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "finance.db"
REQUIRE_POSTGRES_ENV = "REQUIRE_POSTGRES"

# Engine keyword -> (environment variable, default) for server databases.
POOL_SETTINGS: Dict[str, tuple[str, int]] = {
    "pool_size": ("DATABASE_POOL_SIZE", 5),
    "max_overflow": ("DATABASE_MAX_OVERFLOW", 10),
    "pool_timeout": ("DATABASE_POOL_TIMEOUT", 30),
    "pool_recycle": ("DATABASE_POOL_RECYCLE", 1800),
}
CONNECT_TIMEOUT_ENV = "DATABASE_CONNECT_TIMEOUT"
DEFAULT_CONNECT_TIMEOUT = 10


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def read_bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_database_url(raw_url: str | None) -> str:
    """Return the configured database URL, falling back to ``finance.db`` beside the backend."""

    require_postgres = read_bool_env(REQUIRE_POSTGRES_ENV, False)
    url = make_url(raw_url or f"sqlite:///{_DEFAULT_DB_PATH.as_posix()}")
    if url.drivername.startswith("sqlite"):
        if require_postgres:
            raise RuntimeError(f"{REQUIRE_POSTGRES_ENV}=1 needs a PostgreSQL DATABASE_URL")
        if url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return url.render_as_string(hide_password=False)


def build_engine_kwargs(database_url: str) -> Dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    kwargs: Dict[str, Any] = {
        key: _read_int_env(env, default) for key, (env, default) in POOL_SETTINGS.items()
    }
    kwargs["pool_pre_ping"] = True
    kwargs["connect_args"] = {
        "connect_timeout": _read_int_env(CONNECT_TIMEOUT_ENV, DEFAULT_CONNECT_TIMEOUT)
    }
    return kwargs


SQLALCHEMY_DATABASE_URL = resolve_database_url(os.getenv("DATABASE_URL"))

engine = create_engine(SQLALCHEMY_DATABASE_URL, **build_engine_kwargs(SQLALCHEMY_DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator:
    """Yield a database session and ensure it is closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator:
    """Provide a transactional scope for operations outside of FastAPI dependencies."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
