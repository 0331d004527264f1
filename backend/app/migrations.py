"""Bring the finance database schema to the latest Alembic revision."""

from __future__ import annotations

import errno
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect

from .database import SQLALCHEMY_DATABASE_URL, build_engine_kwargs

LOGGER = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
LOCK_PATH = BACKEND_DIR / ".alembic-migration.lock"
LOCK_TIMEOUT_ENV = "ALEMBIC_MIGRATION_LOCK_TIMEOUT"
DEFAULT_LOCK_TIMEOUT = 30.0
LOCK_POLL_INTERVAL = 0.25

if os.name == "posix":  # pragma: no cover - platform specific
    import fcntl
else:  # pragma: no cover - platform specific
    import msvcrt

# Tables of the initial revision. Databases built with ``create_all`` that
# already hold all of them are stamped instead of migrated.
INITIAL_REVISION = "20250110_0001"
INITIAL_TABLES = frozenset(
    {"earnings", "expenses", "time_entries", "clients", "platforms", "report_templates"}
)

# errno values and Windows sharing/lock violations that mean "held elsewhere".
_BUSY_ERRNOS = {errno.EACCES, errno.EAGAIN, errno.EBUSY}
_BUSY_WINERRORS = {32, 33}


def _read_lock_timeout() -> float:
    raw = os.getenv(LOCK_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric %s=%r", LOCK_TIMEOUT_ENV, raw)
        return DEFAULT_LOCK_TIMEOUT
    if value <= 0:
        LOGGER.warning("Ignoring non-positive %s=%r", LOCK_TIMEOUT_ENV, raw)
        return DEFAULT_LOCK_TIMEOUT
    return value


def _try_lock(handle) -> bool:
    try:
        if os.name == "posix":  # pragma: no cover - platform specific
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        else:  # pragma: no cover - platform specific
            msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
    except BlockingIOError:
        return False
    except OSError as error:
        if error.errno in _BUSY_ERRNOS or getattr(error, "winerror", None) in _BUSY_WINERRORS:
            return False
        raise
    return True


def _unlock(handle) -> None:
    try:
        if os.name == "posix":  # pragma: no cover - platform specific
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        else:  # pragma: no cover - platform specific
            msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    except OSError:  # pragma: no cover - lock dies with the handle anyway
        LOGGER.debug("Could not release migration lock", exc_info=True)


@contextmanager
def migration_lock(path: Path = LOCK_PATH, *, timeout: Optional[float] = None) -> Iterator[None]:
    """Serialise migrations between worker processes sharing one checkout."""

    timeout = _read_lock_timeout() if timeout is None else timeout
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a+") as handle:
        deadline = time.monotonic() + timeout
        while not _try_lock(handle):
            if time.monotonic() >= deadline:
                raise TimeoutError(f"Timed out after {timeout:.1f}s waiting for {path}")
            time.sleep(LOCK_POLL_INTERVAL)
        LOGGER.debug("Holding migration lock %s", path)
        try:
            yield
        finally:
            _unlock(handle)


def build_alembic_config(database_url: Optional[str] = None) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option(
        "sqlalchemy.url", database_url or os.getenv("DATABASE_URL") or SQLALCHEMY_DATABASE_URL
    )
    return config


def _stamp_if_prebuilt(config: Config, table_names: set[str]) -> bool:
    """Stamp schemas that predate Alembic; return True when nothing is left to run."""

    if not INITIAL_TABLES <= table_names:
        return False
    LOGGER.info("Found tables from a create_all build; stamping %s", INITIAL_REVISION)
    command.stamp(config, INITIAL_REVISION)
    return ScriptDirectory.from_config(config).get_current_head() == INITIAL_REVISION


def run_database_migrations(database_url: Optional[str] = None) -> None:
    """Upgrade the configured database to head, stamping pre-Alembic schemas first."""

    config = build_alembic_config(database_url)
    url = config.get_main_option("sqlalchemy.url")
    LOGGER.info("Running database migrations at %s", url)

    with migration_lock():
        engine = create_engine(url, **build_engine_kwargs(url))
        try:
            table_names = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

        if "alembic_version" not in table_names and _stamp_if_prebuilt(config, table_names):
            LOGGER.info("Schema already at head")
            return
        command.upgrade(config, "head")
