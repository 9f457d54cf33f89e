"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as inventory/store.py).
UserStore is the repository; _row_to_user is the mapper. There is no API for
creating users: records come from startup seeding or from tests.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, select, text
from sqlalchemy.engine import Engine

from auth.models import User
from core.db import create_store_engine

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Deliberately not UNIQUE: first match wins on lookup.
    Column("username", String(255), nullable=False, index=True),
    Column("password_hash", Text, nullable=False),
)


class UserRepository(Protocol):
    """What the auth routes need from a store."""

    def get_by_username(self, username: str) -> User | None: ...


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        store.create_user(User(username="alice", password_hash=hash_password("secret")))
        user = store.get_by_username("alice")
        store.close()
    """

    def __init__(self, db_url: str = "sqlite://") -> None:
        self.engine: Engine = create_store_engine(db_url)
        _metadata.create_all(self.engine)

    def has_users(self) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(text("SELECT COUNT(*) FROM users")).scalar()
        return (result or 0) > 0

    def create_user(self, user: User) -> int:
        """Insert a user and return its id.

        An explicit user.id is kept (fixtures seed known ids); None lets the
        database assign one.
        """
        values = {"username": user.username, "password_hash": user.password_hash}
        if user.id is not None:
            values["id"] = user.id
        with self.engine.begin() as conn:
            result = conn.execute(_users.insert().values(**values))
        return result.inserted_primary_key[0]

    def get_by_username(self, username: str) -> User | None:
        """Return the first user whose username matches exactly, or None."""
        with self.engine.connect() as conn:
            row = conn.execute(
                select(_users).where(_users.c.username == username).order_by(_users.c.id).limit(1)
            ).fetchone()
        return _row_to_user(row) if row else None

    def close(self) -> None:
        self.engine.dispose()
