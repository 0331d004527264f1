"""Import a browser local-storage backup into the reporting database."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import create_engine

from ..services.record_sources import (
    decode_entries,
    parse_client,
    parse_earning,
    parse_expense,
    parse_platform,
    parse_time_entry,
)
from ..services.report_records import (
    ClientRecord,
    EarningRecord,
    ExpenseRecord,
    PlatformRecord,
    TimeEntryRecord,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@dataclass
class ImportSummary:
    created: int = 0
    skipped_existing: int = 0
    skipped_invalid: int = 0


@dataclass(frozen=True)
class ImportSpec:
    key: str
    required: Sequence[str]
    numeric: Sequence[str]
    parser: Callable[[Mapping[str, Any]], Any]
    model_name: str
    builder: Callable[[Any], Dict[str, Any]]


def _earning_columns(record: EarningRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "date": record.date,
        "amount": record.amount,
        "platform_id": record.platform_id,
        "client_id": record.client_id,
        "category": record.category,
        "description": record.description,
        "hours": record.hours,
    }


def _expense_columns(record: ExpenseRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "date": record.date,
        "amount": record.amount,
        "category": record.category or "Uncategorized",
        "description": record.description,
    }


def _time_entry_columns(record: TimeEntryRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "start_time": record.start_time,
        "end_time": record.end_time,
        "duration": record.duration,
        "total_amount": record.total_amount,
        "hourly_rate": record.hourly_rate,
        "client_id": record.client_id,
        "project_name": record.project_name,
        "description": record.description,
        "is_billable": record.is_billable,
    }


def _client_columns(record: ClientRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "status": record.status,
        "email": record.email,
        "company": record.company,
        "total_earnings": record.total_earnings,
    }


def _platform_columns(record: PlatformRecord) -> Dict[str, Any]:
    return {"id": record.id, "name": record.name, "color": record.color}


IMPORT_SPECS: Sequence[ImportSpec] = (
    ImportSpec("platforms", ("id", "name"), (), parse_platform, "Platform", _platform_columns),
    ImportSpec(
        "clients", ("id", "name"), ("totalEarnings",), parse_client, "Client", _client_columns
    ),
    ImportSpec(
        "earnings",
        ("id", "date", "amount"),
        ("amount", "hours"),
        parse_earning,
        "Earning",
        _earning_columns,
    ),
    ImportSpec(
        "expenses", ("id", "date", "amount"), ("amount",), parse_expense, "Expense", _expense_columns
    ),
    ImportSpec(
        "time_entries",
        ("id", "startTime"),
        ("duration", "totalAmount", "hourlyRate"),
        parse_time_entry,
        "TimeEntry",
        _time_entry_columns,
    ),
)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Read a JSON dump of the browser local storage and insert its earnings, "
            "expenses, time entries, clients, platforms and report templates."
        )
    )
    parser.add_argument("source", type=Path, help="Path of the JSON backup file")
    parser.add_argument(
        "--database-url",
        dest="database_url",
        help="Database URL (defaults to DATABASE_URL or the local SQLite file)",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Validate and count the records without writing them",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every skipped entry and the decoded storage keys",
    )
    return parser.parse_args(argv)


def load_backup(source: Path) -> Dict[str, Any]:
    payload = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{source} must contain a JSON object keyed by local-storage key")
    return payload


def prepare_frame(entries: Iterable[Any], spec: ImportSpec) -> tuple[pd.DataFrame, int]:
    """Normalise raw entries into a frame, returning it with the count of rows dropped."""

    rows = [entry for entry in entries if isinstance(entry, Mapping)]
    invalid = 0
    if not rows:
        return pd.DataFrame(columns=list(spec.required)), invalid

    df = pd.DataFrame(rows)
    for column in spec.required:
        if column not in df.columns:
            df[column] = None
    for column in spec.numeric:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors="coerce")

    df["id"] = df["id"].astype("string").str.strip().replace("", pd.NA)
    before = len(df)
    df = df.dropna(subset=list(spec.required))
    df = df.drop_duplicates(subset="id", keep="first")
    invalid = before - len(df)
    return df, invalid


def _clean_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, (list, dict)):
            cleaned[key] = value
        elif pd.isna(value):
            cleaned[key] = None
        else:
            cleaned[key] = value
    return cleaned


def _import_kind(session, spec: ImportSpec, entries: Iterable[Any]) -> ImportSummary:
    from .. import models

    model = getattr(models, spec.model_name)
    summary = ImportSummary()
    frame, summary.skipped_invalid = prepare_frame(entries, spec)

    for row in frame.to_dict(orient="records"):
        try:
            record = spec.parser(_clean_row(row))
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Skipping invalid %s entry %s: %s", spec.key, row.get("id"), exc)
            summary.skipped_invalid += 1
            continue
        if session.get(model, record.id) is not None:
            summary.skipped_existing += 1
            continue
        session.add(model(**spec.builder(record)))
        summary.created += 1
    session.flush()
    return summary


def _template_payload(raw: Mapping[str, Any]) -> Dict[str, Any]:
    filters = raw.get("filters") or {}
    payload = {
        "id": raw.get("id"),
        "name": raw.get("name"),
        "description": raw.get("description") or "",
        "report_type": raw.get("type", raw.get("report_type")),
        "date_range": raw.get("dateRange", raw.get("date_range")),
        "custom_start_date": raw.get("customStartDate") or raw.get("custom_start_date") or None,
        "custom_end_date": raw.get("customEndDate") or raw.get("custom_end_date") or None,
        "metrics": raw.get("metrics") or [],
        "group_by": raw.get("groupBy", raw.get("group_by")),
        "chart_type": raw.get("chartType", raw.get("chart_type")),
        "filters": {
            "platforms": filters.get("platforms") or [],
            "clients": filters.get("clients") or [],
            "projects": filters.get("projects") or [],
            "categories": filters.get("categories") or [],
            "min_amount": filters.get("minAmount"),
            "max_amount": filters.get("maxAmount"),
        },
    }
    # Missing keys fall back to the schema defaults.
    return {key: value for key, value in payload.items() if value is not None}


def _import_templates(session, entries: Iterable[Any]) -> ImportSummary:
    from .. import models, schemas
    from ..services import ReportService

    summary = ImportSummary()
    for entry in entries:
        if not isinstance(entry, Mapping):
            summary.skipped_invalid += 1
            continue
        try:
            data = schemas.ReportTemplateCreate(**_template_payload(entry))
        except ValidationError as exc:
            LOGGER.warning("Skipping invalid report template %s: %s", entry.get("id"), exc)
            summary.skipped_invalid += 1
            continue
        if data.id and session.get(models.ReportTemplate, data.id) is not None:
            summary.skipped_existing += 1
            continue
        session.add(ReportService.build_template(data))
        summary.created += 1
    session.flush()
    return summary


def import_storage(session, storage: Mapping[str, Any]) -> Dict[str, ImportSummary]:
    """Insert every supported local-storage key into ``session`` without committing."""

    summaries: Dict[str, ImportSummary] = {}
    for spec in IMPORT_SPECS:
        entries = decode_entries(storage.get(spec.key), spec.key)
        summaries[spec.key] = _import_kind(session, spec, entries)
    summaries["report_templates"] = _import_templates(
        session, decode_entries(storage.get("report_templates"), "report_templates")
    )
    return summaries


def _print_summary(summaries: Mapping[str, ImportSummary], dry_run: bool) -> None:
    print("==== Import summary ====" + (" (dry run, nothing saved)" if dry_run else ""))
    for key, summary in summaries.items():
        print(
            f"{key}: created {summary.created}, "
            f"skipped existing {summary.skipped_existing}, "
            f"skipped invalid {summary.skipped_invalid}"
        )


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    from .. import database

    if args.database_url:
        url = database.resolve_database_url(args.database_url)
        database.SessionLocal.configure(bind=create_engine(url, **database.build_engine_kwargs(url)))

    storage = load_backup(args.source)

    with database.session_scope() as session:
        summaries = import_storage(session, storage)
        if args.dry_run:
            session.rollback()
        _print_summary(summaries, args.dry_run)


if __name__ == "__main__":
    main()
