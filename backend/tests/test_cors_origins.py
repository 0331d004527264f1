from fastapi.testclient import TestClient

from backend.app.main import (
    LOCAL_DEVELOPMENT_ORIGINS,
    _load_allowed_origins_from_env,
    _resolve_allowed_origins,
    _split_raw_origins,
    app,
)

LOCAL_DEVELOPMENT_ORIGIN = "http://localhost:5173"


def test_split_raw_origins_accepts_commas_and_whitespace():
    raw = "http://localhost:5173, http://127.0.0.1:5173 http://0.0.0.0:5173"
    assert _split_raw_origins(raw) == [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://0.0.0.0:5173",
    ]


def test_load_allowed_origins_from_env_accepts_space_separated_values(monkeypatch):
    monkeypatch.setenv(
        "BACKEND_ALLOWED_ORIGINS",
        "http://localhost:5173 http://127.0.0.1:5173/",
    )

    origins = _load_allowed_origins_from_env()

    assert origins == [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]


def test_resolved_origins_always_include_dev_servers(monkeypatch):
    monkeypatch.setenv("BACKEND_ALLOWED_ORIGINS", "https://finance.example.com")

    origins = _resolve_allowed_origins()

    assert "https://finance.example.com" in origins
    assert LOCAL_DEVELOPMENT_ORIGINS <= set(origins)


def test_reports_endpoint_includes_cors_headers_for_local_dev_origin():
    client = TestClient(app)

    response = client.options(
        "/reports/templates",
        headers={
            "Origin": LOCAL_DEVELOPMENT_ORIGIN,
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.headers.get("access-control-allow-origin") == LOCAL_DEVELOPMENT_ORIGIN


def test_health_check():
    client = TestClient(app)

    assert client.get("/").json() == {"status": "ok"}
