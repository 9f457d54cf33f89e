"""Unit tests for core/config.py -- the signing-secret policy and defaults."""

import pytest
from pydantic import ValidationError

from core.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DEBUG", "JWT_SECRET", "JWTSETTINGS__SECRET"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings(jwt_secret="x" * 32)
    assert s.jwt_issuer == "car-rental-app"
    assert s.jwt_audience == "car-rental-users"
    assert s.token_expire_seconds == 3600
    assert s.database_url == "sqlite://"
    assert s.cors_allow_origins == ["*"]
    assert s.enforce_password_check is False


def test_missing_secret_in_production_refuses_to_start():
    with pytest.raises(ValidationError, match="JWT_SECRET is required"):
        Settings(debug=False)


def test_missing_secret_in_debug_generates_one():
    a = Settings(debug=True)
    b = Settings(debug=True)
    assert len(a.jwt_secret) >= 32
    assert a.jwt_secret != b.jwt_secret


def test_short_secret_rejected():
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(jwt_secret="too-short")


def test_secret_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "e" * 40)
    assert Settings().jwt_secret == "e" * 40


def test_secret_from_nested_style_environment(monkeypatch):
    monkeypatch.setenv("JWTSETTINGS__SECRET", "n" * 40)
    assert Settings().jwt_secret == "n" * 40


def test_password_check_from_environment(monkeypatch):
    monkeypatch.setenv("ENFORCE_PASSWORD_CHECK", "true")
    assert Settings(jwt_secret="x" * 32).enforce_password_check is True
