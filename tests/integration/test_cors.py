"""Integration tests covering CORS behaviour for API endpoints."""

import pytest
from flask.testing import FlaskClient

from calendarl10n.app import create_app

ALLOWED_ORIGIN = "https://calendar.example"
DISALLOWED_ORIGIN = "https://blocked.test"


@pytest.fixture()
def cors_client(monkeypatch: pytest.MonkeyPatch) -> FlaskClient:
    """Return a client configured with a known CORS allow-list."""

    monkeypatch.setenv("CALENDARL10N_ALLOWED_ORIGINS", f" {ALLOWED_ORIGIN} ,")

    app = create_app()
    app.config.update(TESTING=True)

    with app.test_client() as client:
        yield client


def test_translations_endpoint_includes_cors_headers(cors_client: FlaskClient) -> None:
    response = cors_client.get("/api/v1/translations/de", headers={"Origin": ALLOWED_ORIGIN})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN


def test_preflight_request_returns_success(cors_client: FlaskClient) -> None:
    response = cors_client.options(
        "/api/v1/translations/de",
        headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == ALLOWED_ORIGIN
    assert "GET" in response.headers.get("Access-Control-Allow-Methods", "")


def test_disallowed_origin_does_not_receive_cors_headers(cors_client: FlaskClient) -> None:
    response = cors_client.get("/api/v1/translations/de", headers={"Origin": DISALLOWED_ORIGIN})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_missing_allow_list_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CALENDARL10N_ALLOWED_ORIGINS", raising=False)

    with pytest.warns(UserWarning, match="No allowed origins"):
        create_app()
