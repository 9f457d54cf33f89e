"""
tests/test_app_lifecycle.py -- The real application lifespan and the catch-all error handler.

The shared api_client fixture swaps the lifespan out, so these tests put the
real one back and check what it does on its own:
  - SEED_USERNAME creates a loginable account with a bcrypt password hash
  - a warning is logged while the password check is disabled
  - both stores are closed at shutdown
  - an unexpected store failure becomes a 500 internal_error envelope with
    no exception text in the body
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi.testclient import TestClient

from api.main import app, lifespan
from auth.store import UserStore
from auth.tokens import verify_password
from core.config import get_settings
from inventory.store import CarStore


class TestRealLifespan:
    def test_startup_seeds_warns_and_shutdown_closes(self, monkeypatch, caplog) -> None:
        settings = get_settings()
        monkeypatch.setattr(settings, "seed_username", "admin")
        monkeypatch.setattr(settings, "seed_password", "letmein")
        monkeypatch.setattr(settings, "enforce_password_check", False)
        monkeypatch.setattr(app.router, "lifespan_context", lifespan)

        closed: list[str] = []
        car_close, user_close = CarStore.close, UserStore.close
        monkeypatch.setattr(CarStore, "close", lambda self: (closed.append("cars"), car_close(self))[1])
        monkeypatch.setattr(UserStore, "close", lambda self: (closed.append("users"), user_close(self))[1])

        with caplog.at_level(logging.INFO, logger="carrental.api"):
            with TestClient(app) as client:
                seeded = app.state.user_store.get_by_username("admin")
                assert seeded is not None, "SEED_USERNAME account was not created at startup"
                assert verify_password("letmein", seeded.password_hash)

                resp = client.post("/api/auth/login", json={"username": "admin", "password": "anything"})
                assert resp.status_code == 200, f"Expected 200, got {resp.status_code}: {resp.text}"
                assert "Token" in resp.json()
                assert closed == []

        assert sorted(closed) == ["cars", "users"]
        assert "Password check disabled" in caplog.text
        assert "Seeded user 'admin'" in caplog.text

    def test_no_warning_when_password_check_enforced(self, monkeypatch, caplog) -> None:
        monkeypatch.setattr(get_settings(), "enforce_password_check", True)
        monkeypatch.setattr(app.router, "lifespan_context", lifespan)

        with caplog.at_level(logging.WARNING, logger="carrental.api"):
            with TestClient(app):
                pass

        assert "Password check disabled" not in caplog.text


class _BrokenCarStore:
    """CarRepository whose reads fail with an internal detail in the message."""

    def list_cars(self):
        raise RuntimeError("connection to secret-host:5432 refused")

    def create_car(self, car):
        raise RuntimeError("connection to secret-host:5432 refused")


def test_unexpected_error_returns_internal_error_envelope(monkeypatch, caplog) -> None:
    user_store = UserStore()

    @asynccontextmanager
    async def broken_lifespan(app):
        app.state.car_store = _BrokenCarStore()
        app.state.user_store = user_store
        yield

    monkeypatch.setattr(app.router, "lifespan_context", broken_lifespan)
    try:
        with caplog.at_level(logging.ERROR, logger="carrental.api"):
            with TestClient(app, raise_server_exceptions=False) as client:
                resp = client.get("/api/cars")
    finally:
        user_store.close()

    assert resp.status_code == 500, f"Expected 500, got {resp.status_code}: {resp.text}"
    assert resp.json()["error"]["code"] == "internal_error"
    assert "secret-host" not in resp.text
    assert "RuntimeError" not in resp.text
    assert "Unhandled exception on GET /api/cars" in caplog.text
