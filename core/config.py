"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the car rental API happen here. No module
should call os.getenv() directly -- import get_settings() instead.

  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance afterwards.

  BaseSettings (pydantic-settings): reads values from environment variables
      and an optional .env file. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET).

  @model_validator(mode="after"): enforces the signing-secret policy once all
      fields are resolved. There is no hard-coded fallback key: dev mode
      generates one with a warning, production mode refuses to start.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or inventory/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("carrental.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in tests
    without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Token signing and validation
    # ------------------------------------------------------------------

    # Empty string is the "not configured" sentinel. JWTSETTINGS__SECRET is
    # accepted for deployments that still use the nested JwtSettings:Secret key.
    jwt_secret: str = Field(default="", validation_alias=AliasChoices("jwt_secret", "jwtsettings__secret"))
    jwt_issuer: str = "car-rental-app"
    jwt_audience: str = "car-rental-users"
    token_expire_seconds: int = 3600

    # Off by default: login only checks that the username exists.
    enforce_password_check: bool = False

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    database_url: str = "sqlite://"
    seed_username: str = ""
    seed_password: str = ""

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_allow_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Enforce the signing-secret policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Issued tokens stop validating after a restart.

        Production mode: refuse to start without JWT_SECRET.

        Both modes: reject secrets shorter than 32 characters.
        """
        if not self.jwt_secret:
            if self.debug:
                self.jwt_secret = secrets.token_hex(32)
                logger.warning("Using auto-generated JWT_SECRET. Tokens will not survive a restart.")
            else:
                raise ValueError(
                    "JWT_SECRET is required in production mode. "
                    "Set JWT_SECRET in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() if you need to inject different
    environment variables.
    """
    return Settings()
