from __future__ import annotations

import json
from decimal import Decimal

import pytest

from backend.app import models
from backend.app.scripts.import_local_storage import (
    IMPORT_SPECS,
    import_storage,
    load_backup,
    prepare_frame,
)


def _storage() -> dict:
    return {
        "platforms": json.dumps([{"id": "p1", "name": "Upwork", "color": "#14a800"}]),
        "clients": [{"id": "c1", "name": "Acme", "totalEarnings": "300"}],
        "earnings": [
            {"id": "e1", "date": "2024-03-01", "amount": 100, "platformId": "p1", "clientId": "c1"},
            {"id": "e1", "date": "2024-03-02", "amount": 999},
            {"id": "e2", "date": "2024-03-02T10:00:00.000Z", "amount": "not-a-number"},
            {"id": "e3", "date": "someday", "amount": 50},
            {"id": "e4", "date": "2024-03-03", "amount": "75.25", "hours": 1.5},
        ],
        "expenses": "not json at all",
        "time_entries": [
            {
                "id": "t1",
                "startTime": "2024-03-01T09:00:00",
                "endTime": "2024-03-01T10:00:00",
                "duration": 3600,
                "projectName": "Website",
            },
            {"id": "t2", "startTime": "2024-03-02T09:00:00"},
        ],
        "report_templates": [
            {
                "id": "custom-1",
                "name": "Design income",
                "description": "Design work only",
                "type": "earnings",
                "dateRange": "year",
                "groupBy": "month",
                "chartType": "line",
                "metrics": ["total"],
                "filters": {"categories": ["Design"], "minAmount": 10},
            },
            {"id": "broken", "name": "", "type": "earnings"},
        ],
    }


def test_prepare_frame_drops_incomplete_and_duplicate_rows() -> None:
    spec = next(spec for spec in IMPORT_SPECS if spec.key == "earnings")

    frame, invalid = prepare_frame(_storage()["earnings"], spec)

    assert list(frame["id"]) == ["e1", "e3", "e4"]
    assert invalid == 2


def test_import_storage_inserts_valid_records(db_session) -> None:
    summaries = import_storage(db_session, _storage())

    assert summaries["platforms"].created == 1
    assert summaries["clients"].created == 1
    assert summaries["earnings"].created == 2
    assert summaries["earnings"].skipped_invalid == 3
    assert summaries["expenses"].created == 0
    assert summaries["time_entries"].created == 2
    assert summaries["report_templates"].created == 1
    assert summaries["report_templates"].skipped_invalid == 1

    earning = db_session.get(models.Earning, "e4")
    assert earning.amount == Decimal("75.25")
    assert earning.hours == Decimal("1.5")
    running = db_session.get(models.TimeEntry, "t2")
    assert running.end_time is None
    assert running.is_billable is True
    template = db_session.get(models.ReportTemplate, "custom-1")
    assert template.group_by == "month"
    assert template.filters["categories"] == ["Design"]


def test_import_storage_skips_existing_ids(db_session) -> None:
    import_storage(db_session, _storage())

    again = import_storage(db_session, _storage())

    assert again["earnings"].created == 0
    assert again["earnings"].skipped_existing == 2
    assert again["report_templates"].skipped_existing == 1


def test_load_backup_requires_object(tmp_path) -> None:
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_backup(backup)

    backup.write_text(json.dumps(_storage()), encoding="utf-8")
    assert set(load_backup(backup)) >= {"earnings", "report_templates"}


def test_main_dry_run_reports_without_saving(tmp_path, monkeypatch, capsys) -> None:
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from backend.app import database
    from backend.app.scripts import import_local_storage

    engine = create_engine(f"sqlite:///{tmp_path / 'import.db'}")
    database.Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(database, "SessionLocal", sessionmaker(bind=engine, autoflush=False))
    backup = tmp_path / "backup.json"
    backup.write_text(json.dumps(_storage()), encoding="utf-8")

    import_local_storage.main([str(backup), "--dry-run"])

    output = capsys.readouterr().out
    assert "dry run, nothing saved" in output
    assert "earnings: created 2, skipped existing 0, skipped invalid 3" in output
    with engine.connect() as connection:
        assert connection.exec_driver_sql("SELECT COUNT(*) FROM earnings").scalar() == 0
    engine.dispose()
