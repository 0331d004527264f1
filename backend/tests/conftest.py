from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# The in-memory test database is created from the models below.
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "0")

from backend.app.database import Base, get_db
from backend.app.main import app
from backend.app import models
from backend.app.services.report_records import (
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    PlatformRecord,
    TimeEntryRecord,
)
from backend.app.services.record_sources import InMemoryRecordRepository

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

NOW = datetime(2024, 3, 31, 12, 0, 0)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def sample_repository() -> InMemoryRecordRepository:
    """Records spread over February and March 2024."""

    return InMemoryRecordRepository(
        earnings=[
            EarningRecord(id="e1", date=date(2024, 3, 1), amount=Decimal("100"), platform_id="p1", client_id="c1"),
            EarningRecord(id="e2", date=date(2024, 3, 1), amount=Decimal("50"), platform_id="p2", client_id="c2"),
            EarningRecord(id="e3", date=date(2024, 3, 15), amount=Decimal("200"), platform_id="p1", client_id="c1"),
            EarningRecord(id="e4", date=date(2024, 2, 10), amount=Decimal("120"), platform_id="p1"),
        ],
        expenses=[
            ExpenseRecord(id="x1", date=date(2024, 3, 5), amount=Decimal("40"), category="Software"),
            ExpenseRecord(id="x2", date=date(2024, 3, 6), amount=Decimal("10")),
        ],
        time_entries=[
            TimeEntryRecord(
                id="t1",
                start_time=datetime(2024, 3, 4, 9, 0),
                end_time=datetime(2024, 3, 4, 11, 0),
                duration=7200,
                total_amount=Decimal("100"),
                project_name="Website",
            ),
            TimeEntryRecord(
                id="t2",
                start_time=datetime(2024, 3, 30, 14, 0),
                duration=1800,
                project_name="Website",
            ),
        ],
        clients=[
            ClientRecord(id="c1", name="Acme", total_earnings=Decimal("300")),
            ClientRecord(id="c2", name="Globex", status="inactive", total_earnings=Decimal("50")),
        ],
        platforms=[
            PlatformRecord(id="p1", name="Upwork", color="#14a800"),
            PlatformRecord(id="p2", name="Fiverr", color="#1dbf73"),
        ],
    )


@pytest.fixture
def seed_records(db_session: Session) -> dict:
    platform = models.Platform(id="p1", name="Upwork", color="#14a800")
    acme = models.Client(id="c1", name="Acme")
    db_session.add_all([platform, acme])
    db_session.add_all(
        [
            models.Earning(
                id="e1",
                date=date(2024, 3, 1),
                amount=Decimal("100"),
                platform_id="p1",
                client_id="c1",
            ),
            models.Earning(id="e2", date=date(2024, 3, 15), amount=Decimal("200"), platform_id="p1"),
            models.Expense(id="x1", date=date(2024, 3, 5), amount=Decimal("40"), category="Software"),
            models.TimeEntry(
                id="t1",
                start_time=datetime(2024, 3, 4, 9, 0),
                end_time=datetime(2024, 3, 4, 11, 0),
                duration=7200,
                project_name="Website",
            ),
        ]
    )
    db_session.commit()
    return {"platform": platform, "client": acme}
