"""
tests/conftest.py -- Shared test fixtures for the car rental API tests.

This module provides:
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - stores: fresh in-memory (CarStore, UserStore) per test
  - api_client: (client, car_store, user_store) with the real app and routes

Each test gets its own private in-memory databases, so "empty store"
scenarios need no cleanup.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates JWT_SECRET in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from inventory.store import CarStore


def _patch_lifespan(car_store, user_store):
    """Return an async context manager that replaces the real lifespan.

    Any objects satisfying the store protocols can be passed in, which is how
    tests substitute fakes for the SQL-backed stores.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.car_store = car_store
        app.state.user_store = user_store
        yield

    return test_lifespan


@pytest.fixture
def stores() -> Generator[tuple[CarStore, UserStore], None, None]:
    car_store = CarStore("sqlite://")
    user_store = UserStore("sqlite://")
    yield car_store, user_store
    car_store.close()
    user_store.close()


@pytest.fixture
def api_client(stores) -> Generator[tuple[TestClient, CarStore, UserStore], None, None]:
    """Yield (client, car_store, user_store) for API integration tests.

    Tests may seed users into user_store before or after making requests.
    """
    car_store, user_store = stores
    original = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(car_store, user_store)
    try:
        with TestClient(app, raise_server_exceptions=True) as client:
            yield client, car_store, user_store
    finally:
        app.router.lifespan_context = original
