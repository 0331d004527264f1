from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from backend.app import models
from backend.app.services.record_sources import parse_datetime


def test_create_and_list_earnings(client, db_session) -> None:
    response = client.post(
        "/earnings/",
        json={
            "id": "client-generated",
            "date": "2024-03-01",
            "amount": "150.00",
            "platform_id": "p1",
            "category": " Design ",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == "client-generated"
    assert body["category"] == "Design"
    assert db_session.get(models.Earning, "client-generated") is not None

    listing = client.get("/earnings/", params={"platform_id": "p1", "min_amount": "100"})
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert Decimal(listing.json()["items"][0]["amount"]) == Decimal("150")


def test_earning_filters_validate_bounds(client) -> None:
    dates = client.get("/earnings/", params={"start_date": "2024-03-10", "end_date": "2024-03-01"})
    amounts = client.get("/earnings/", params={"min_amount": "10", "max_amount": "1"})

    assert dates.status_code == 400
    assert dates.json()["detail"] == "start_date cannot be after end_date"
    assert amounts.status_code == 400
    assert amounts.json()["detail"] == "min_amount cannot be greater than max_amount"


def test_negative_amount_is_rejected(client) -> None:
    response = client.post("/earnings/", json={"date": "2024-03-01", "amount": "-1"})

    assert response.status_code == 422


def test_get_and_delete_missing_records_return_404(client) -> None:
    assert client.get("/earnings/missing").json() == {"detail": "Earning not found"}
    assert client.delete("/expenses/missing").status_code == 404
    assert client.get("/time-entries/missing").status_code == 404
    assert client.get("/clients/missing").status_code == 404
    assert client.delete("/platforms/missing").status_code == 404


def test_expense_listing_filters_by_date_range(client, seed_records) -> None:
    inside = client.get("/expenses/", params={"start_date": "2024-03-01", "end_date": "2024-03-31"})
    outside = client.get("/expenses/", params={"start_date": "2024-04-01"})

    assert inside.json()["total"] == 1
    assert inside.json()["items"][0]["category"] == "Software"
    assert outside.json()["total"] == 0


def test_time_entry_rejects_end_before_start(client) -> None:
    response = client.post(
        "/time-entries/",
        json={"start_time": "2024-03-01T10:00:00", "end_time": "2024-03-01T09:00:00"},
    )

    assert response.status_code == 422


def test_time_entry_lifecycle(client, db_session) -> None:
    created = client.post(
        "/time-entries/",
        json={
            "start_time": "2024-03-01T09:00:00",
            "end_time": "2024-03-01T10:30:00",
            "duration": 5400,
            "project_name": "Website",
        },
    )
    assert created.status_code == 201
    entry_id = created.json()["id"]
    assert created.json()["is_billable"] is True

    assert client.get(f"/time-entries/{entry_id}").json()["duration"] == 5400
    assert client.delete(f"/time-entries/{entry_id}").status_code == 204
    assert db_session.get(models.TimeEntry, entry_id) is None


def test_clients_and_platforms(client, seed_records) -> None:
    created = client.post("/clients/", json={"name": "Globex", "status": "inactive"})
    assert created.status_code == 201

    clients = client.get("/clients/")
    assert {item["name"] for item in clients.json()["items"]} == {"Acme", "Globex"}

    platform = client.post("/platforms/", json={"name": "Fiverr", "color": "#1dbf73"})
    assert platform.status_code == 201
    platforms = client.get("/platforms/")
    assert {item["name"] for item in platforms.json()["items"]} == {"Upwork", "Fiverr"}

    platform_id = platform.json()["id"]
    assert client.get(f"/platforms/{platform_id}").json()["color"] == "#1dbf73"
    assert client.delete(f"/platforms/{platform_id}").status_code == 204
    assert client.get(f"/platforms/{platform_id}").status_code == 404


def test_expense_search_and_categories(client, seed_records) -> None:
    created = client.post(
        "/expenses/",
        json={"date": "2024-03-07", "amount": "12.50", "category": "Travel", "description": "Train to Berlin"},
    )
    blank = client.post(
        "/expenses/",
        json={"date": "2024-03-08", "amount": "3", "category": "travel", "description": "   "},
    )
    assert created.status_code == 201
    assert blank.json()["description"] is None

    found = client.get("/expenses/", params={"search": "berlin"})
    assert found.json()["total"] == 1
    assert found.json()["items"][0]["id"] == created.json()["id"]

    by_category = client.get("/expenses/", params={"category": "TRAVEL"})
    assert by_category.json()["total"] == 2

    categories = client.get("/expenses/categories")
    assert categories.status_code == 200
    assert categories.json() == ["Software", "Travel", "travel"]


def test_time_entry_offsets_are_stored_as_naive_local_time(client, db_session) -> None:
    created = client.post(
        "/time-entries/",
        json={"start_time": "2024-03-01T09:00:00", "end_time": "2024-03-02T10:00:00Z"},
    )

    assert created.status_code == 201
    stored = db_session.get(models.TimeEntry, created.json()["id"])
    expected_end = datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert stored.start_time == datetime(2024, 3, 1, 9, 0)
    assert stored.end_time == expected_end


def test_time_entry_offset_matches_imported_timestamp(client, db_session) -> None:
    raw = "2024-03-01T23:30:00-05:00"

    created = client.post("/time-entries/", json={"start_time": raw})

    assert created.status_code == 201
    stored = db_session.get(models.TimeEntry, created.json()["id"])
    assert stored.start_time == parse_datetime(raw)
    assert stored.start_time.tzinfo is None
