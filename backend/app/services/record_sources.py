"""Readers that hand typed records to the reporting pipeline.

The pipeline never reads storage directly. Callers pass a ``RecordRepository``:
the SQL-backed one used by the API, an in-memory one for fixtures, or the one
built from a browser local-storage backup. Raw shapes are converted into
tagged records here, once, at the loading boundary.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Protocol, TypeVar

from sqlalchemy.orm import Session

from .. import models
from .report_records import (
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    PlatformRecord,
    TimeEntryRecord,
    to_decimal,
)

LOGGER = logging.getLogger(__name__)

LOCAL_STORAGE_KEYS = (
    "earnings",
    "expenses",
    "time_entries",
    "clients",
    "platforms",
    "report_templates",
)

ParsedT = TypeVar("ParsedT")


class RecordRepository(Protocol):
    """Read-only source of every record kind the reports aggregate."""

    def earnings(self) -> Sequence[EarningRecord]: ...

    def expenses(self) -> Sequence[ExpenseRecord]: ...

    def time_entries(self) -> Sequence[TimeEntryRecord]: ...

    def clients(self) -> Sequence[ClientRecord]: ...

    def platforms(self) -> Sequence[PlatformRecord]: ...


class InMemoryRecordRepository:
    """Repository over records already held in memory."""

    def __init__(
        self,
        *,
        earnings: Iterable[EarningRecord] = (),
        expenses: Iterable[ExpenseRecord] = (),
        time_entries: Iterable[TimeEntryRecord] = (),
        clients: Iterable[ClientRecord] = (),
        platforms: Iterable[PlatformRecord] = (),
    ) -> None:
        self._earnings = tuple(earnings)
        self._expenses = tuple(expenses)
        self._time_entries = tuple(time_entries)
        self._clients = tuple(clients)
        self._platforms = tuple(platforms)

    def earnings(self) -> Sequence[EarningRecord]:
        return self._earnings

    def expenses(self) -> Sequence[ExpenseRecord]:
        return self._expenses

    def time_entries(self) -> Sequence[TimeEntryRecord]:
        return self._time_entries

    def clients(self) -> Sequence[ClientRecord]:
        return self._clients

    def platforms(self) -> Sequence[PlatformRecord]:
        return self._platforms


def _optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return to_decimal(value)


def earning_from_model(earning: models.Earning) -> EarningRecord:
    return EarningRecord(
        id=str(earning.id),
        date=earning.date,
        amount=to_decimal(earning.amount),
        platform_id=earning.platform_id,
        client_id=earning.client_id,
        category=earning.category,
        description=earning.description,
        hours=_optional_decimal(earning.hours),
    )


def expense_from_model(expense: models.Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=str(expense.id),
        date=expense.date,
        amount=to_decimal(expense.amount),
        category=expense.category,
        description=expense.description,
    )


def time_entry_from_model(entry: models.TimeEntry) -> TimeEntryRecord:
    return TimeEntryRecord(
        id=str(entry.id),
        start_time=entry.start_time,
        duration=int(entry.duration or 0),
        end_time=entry.end_time,
        total_amount=_optional_decimal(entry.total_amount),
        client_id=entry.client_id,
        project_name=entry.project_name,
        description=entry.description,
        hourly_rate=_optional_decimal(entry.hourly_rate),
        is_billable=bool(entry.is_billable),
    )


def client_from_model(client: models.Client) -> ClientRecord:
    return ClientRecord(
        id=str(client.id),
        name=client.name,
        status=client.status,
        email=client.email,
        company=client.company,
        total_earnings=_optional_decimal(client.total_earnings),
    )


def platform_from_model(platform: models.Platform) -> PlatformRecord:
    return PlatformRecord(id=str(platform.id), name=platform.name, color=platform.color)


class SqlRecordRepository:
    """Repository reading the record tables through a SQLAlchemy session.

    Each collection is loaded at most once per repository instance.
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._cache: dict[str, tuple] = {}

    def _load(self, name: str, loader: Callable[[], Iterable[Any]]) -> tuple:
        if name not in self._cache:
            self._cache[name] = tuple(loader())
        return self._cache[name]

    def earnings(self) -> Sequence[EarningRecord]:
        return self._load(
            "earnings",
            lambda: (
                earning_from_model(item)
                for item in self._db.query(models.Earning)
                .order_by(models.Earning.date, models.Earning.created_at)
                .all()
            ),
        )

    def expenses(self) -> Sequence[ExpenseRecord]:
        return self._load(
            "expenses",
            lambda: (
                expense_from_model(item)
                for item in self._db.query(models.Expense)
                .order_by(models.Expense.date, models.Expense.created_at)
                .all()
            ),
        )

    def time_entries(self) -> Sequence[TimeEntryRecord]:
        return self._load(
            "time_entries",
            lambda: (
                time_entry_from_model(item)
                for item in self._db.query(models.TimeEntry)
                .order_by(models.TimeEntry.start_time)
                .all()
            ),
        )

    def clients(self) -> Sequence[ClientRecord]:
        return self._load(
            "clients",
            lambda: (
                client_from_model(item)
                for item in self._db.query(models.Client).order_by(models.Client.name).all()
            ),
        )

    def platforms(self) -> Sequence[PlatformRecord]:
        return self._load(
            "platforms",
            lambda: (
                platform_from_model(item)
                for item in self._db.query(models.Platform).order_by(models.Platform.name).all()
            ),
        )


def parse_date(value: Any) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp and keep the calendar day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value.strip()) < 10:
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO timestamp into a naive local datetime."""

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        moment = datetime.fromisoformat(raw)
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_earning(raw: Mapping[str, Any]) -> EarningRecord:
    return EarningRecord(
        id=str(raw["id"]),
        date=parse_date(raw["date"]),
        amount=to_decimal(raw["amount"]),
        platform_id=_optional_text(raw.get("platformId")),
        client_id=_optional_text(raw.get("clientId")),
        category=_optional_text(raw.get("category")),
        description=_optional_text(raw.get("description")),
        hours=_optional_decimal(raw.get("hours")),
    )


def parse_expense(raw: Mapping[str, Any]) -> ExpenseRecord:
    return ExpenseRecord(
        id=str(raw["id"]),
        date=parse_date(raw["date"]),
        amount=to_decimal(raw["amount"]),
        category=_optional_text(raw.get("category")),
        description=_optional_text(raw.get("description")),
    )


def parse_time_entry(raw: Mapping[str, Any]) -> TimeEntryRecord:
    end_time = raw.get("endTime")
    duration = int(raw.get("duration") or 0)
    if duration < 0:
        raise ValueError("duration must be non-negative")
    return TimeEntryRecord(
        id=str(raw["id"]),
        start_time=parse_datetime(raw["startTime"]),
        duration=duration,
        end_time=parse_datetime(end_time) if end_time else None,
        total_amount=_optional_decimal(raw.get("totalAmount")),
        client_id=_optional_text(raw.get("clientId")),
        project_name=_optional_text(raw.get("projectName")),
        description=_optional_text(raw.get("description")),
        hourly_rate=_optional_decimal(raw.get("hourlyRate")),
        is_billable=raw.get("isBillable") is not False,
    )


def parse_client(raw: Mapping[str, Any]) -> ClientRecord:
    return ClientRecord(
        id=str(raw["id"]),
        name=str(raw["name"]),
        status=str(raw.get("status") or "active"),
        email=_optional_text(raw.get("email")),
        company=_optional_text(raw.get("company")),
        total_earnings=_optional_decimal(raw.get("totalEarnings")),
    )


def parse_platform(raw: Mapping[str, Any]) -> PlatformRecord:
    return PlatformRecord(
        id=str(raw["id"]),
        name=str(raw["name"]),
        color=_optional_text(raw.get("color")),
    )


def decode_entries(raw_value: Any, key: str) -> list[Any]:
    """Decode one local-storage value into a list; malformed or missing JSON is empty."""

    if raw_value is None:
        return []
    if isinstance(raw_value, (str, bytes)):
        try:
            raw_value = json.loads(raw_value)
        except ValueError:
            LOGGER.debug("Ignoring malformed JSON stored under %s", key)
            return []
    if not isinstance(raw_value, list):
        LOGGER.debug("Ignoring non-list value stored under %s", key)
        return []
    return raw_value


def _parse_entries(
    entries: Iterable[Any], parser: Callable[[Mapping[str, Any]], ParsedT], key: str
) -> tuple[ParsedT, ...]:
    parsed = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            LOGGER.debug("Skipping non-object entry %d under %s", position, key)
            continue
        try:
            parsed.append(parser(entry))
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.debug("Skipping malformed entry %d under %s: %s", position, key, exc)
    return tuple(parsed)


@dataclass(frozen=True)
class LocalStorageSnapshot:
    """Records recovered from a browser local-storage dump."""

    earnings: tuple[EarningRecord, ...] = ()
    expenses: tuple[ExpenseRecord, ...] = ()
    time_entries: tuple[TimeEntryRecord, ...] = ()
    clients: tuple[ClientRecord, ...] = ()
    platforms: tuple[PlatformRecord, ...] = ()
    report_templates: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, storage: Mapping[str, Any]) -> "LocalStorageSnapshot":
        """Build a snapshot from ``{key: value}`` where values are JSON text or lists."""

        return cls(
            earnings=_parse_entries(decode_entries(storage.get("earnings"), "earnings"), parse_earning, "earnings"),
            expenses=_parse_entries(decode_entries(storage.get("expenses"), "expenses"), parse_expense, "expenses"),
            time_entries=_parse_entries(
                decode_entries(storage.get("time_entries"), "time_entries"), parse_time_entry, "time_entries"
            ),
            clients=_parse_entries(decode_entries(storage.get("clients"), "clients"), parse_client, "clients"),
            platforms=_parse_entries(decode_entries(storage.get("platforms"), "platforms"), parse_platform, "platforms"),
            report_templates=tuple(
                dict(entry)
                for entry in decode_entries(storage.get("report_templates"), "report_templates")
                if isinstance(entry, Mapping)
            ),
        )

    def repository(self) -> InMemoryRecordRepository:
        return InMemoryRecordRepository(
            earnings=self.earnings,
            expenses=self.expenses,
            time_entries=self.time_entries,
            clients=self.clients,
            platforms=self.platforms,
        )
