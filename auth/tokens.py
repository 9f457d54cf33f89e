"""
auth/tokens.py -- JWT issuance/validation and password hashing.

Security design decisions:
  JWT: python-jose with HS256. One secret (Settings.jwt_secret) both signs and
       validates, so every token this service issues is accepted by its own
       middleware. Tokens carry the username in the "name" claim plus iss, aud,
       iat, nbf and exp. Verification returns None on any failure -- the
       route layer turns that into a 401.

  Passwords: bcrypt directly (no passlib wrapper). Login does not check the
       password unless ENFORCE_PASSWORD_CHECK is on; with the check on,
       authenticate_user() always runs bcrypt, against _DUMMY_HASH when the
       username is unknown, so response time does not reveal which usernames
       exist.

Layer rule: no imports from api/ or inventory/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from core.config import get_settings

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserRepository

logger = logging.getLogger("carrental.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A stored value that is not a bcrypt hash never matches.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


_DUMMY_HASH: str = hash_password("carrental_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(username: str, expire_seconds: int = 0) -> str:
    """Encode a signed JWT for username.

    Args:
        username:       Stored in the "name" claim.
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds (one hour).

    Timestamps are whole seconds, so exp - iat equals the lifetime exactly.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued = datetime.now(timezone.utc).replace(microsecond=0)
    payload = {
        "name": username,
        "iss": _settings.jwt_issuer,
        "aud": _settings.jwt_audience,
        "iat": issued,
        "nbf": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.jwt_secret, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Checks signature, issuer, audience and lifetime. A token without a
    "name" claim is rejected as well.
    """
    try:
        payload = jwt.decode(
            token,
            _settings.jwt_secret,
            algorithms=[_ALGORITHM],
            audience=_settings.jwt_audience,
            issuer=_settings.jwt_issuer,
        )
    except JWTError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
    if not payload.get("name"):
        return None
    return payload


# ---------------------------------------------------------------------------
# User authentication
# ---------------------------------------------------------------------------


def authenticate_user(
    store: UserRepository,
    username: str,
    password: str,
    check_password: bool = False,
) -> User | None:
    """Resolve a login attempt to a User, or None when it must be refused.

    With check_password=False only the username is looked up (exact match).
    With check_password=True bcrypt runs whether or not the user exists.
    """
    user = store.get_by_username(username)
    if not check_password:
        return user
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
