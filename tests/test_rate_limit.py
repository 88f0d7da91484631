from collections.abc import Callable

from fastapi import FastAPI
from fastapi.testclient import TestClient

from anki_heatmap.core.middleware import RequestWindow
from anki_heatmap.main import create_app


def test_widget_endpoint_throttled_after_threshold(
    monkeypatch, override_db: Callable[[FastAPI], None]
) -> None:
    """Widget requests beyond the budget get 429 with Retry-After."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
    app = create_app()
    override_db(app)
    client = TestClient(app)

    first = client.get("/widget/small")
    second = client.get("/widget/small.svg")

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json() == {"detail": "AnkiConnect is being polled too often"}
    assert second.headers["Retry-After"]


def test_budget_is_shared_between_clients(
    monkeypatch, override_db: Callable[[FastAPI], None]
) -> None:
    """All callers draw from the one AnkiConnect budget."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    app = create_app()
    override_db(app)
    client = TestClient(app)

    first = client.get("/widget/small", headers={"X-Forwarded-For": "203.0.113.10"})
    second = client.get("/heatmap", headers={"X-Forwarded-For": "203.0.113.11"})

    assert first.status_code == 200
    assert second.status_code == 429


def test_non_ankiconnect_routes_not_throttled(monkeypatch) -> None:
    """Routes that never reach AnkiConnect are not throttled."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
    app = create_app()
    client = TestClient(app)

    first = client.get("/health/live")
    second = client.get("/health/live")

    assert first.status_code == 200
    assert second.status_code == 200


def test_request_window_frees_slots_after_window() -> None:
    window = RequestWindow(max_requests=2, window_seconds=10)

    assert window.acquire(100.0) is None
    assert window.acquire(101.0) is None
    assert window.acquire(104.0) == 6
    assert window.acquire(110.0) is None


def test_request_window_clamps_invalid_config() -> None:
    window = RequestWindow(max_requests=0, window_seconds=0)

    assert window.max_requests == 1
    assert window.window_seconds == 1
    assert window.acquire(5.0) is None
    assert window.acquire(5.5) == 1
