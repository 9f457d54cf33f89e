"""
core/db.py -- Engine factory shared by the inventory and user stores.

The default DATABASE_URL ("sqlite://") is a private in-memory database. Plain
in-memory SQLite is per-connection, and sync route handlers run on a thread
pool, so in-memory URLs get a StaticPool: one connection shared by every
thread for the life of the engine. Data lives exactly as long as the engine.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def is_in_memory(db_url: str) -> bool:
    return db_url in _IN_MEMORY_URLS or "mode=memory" in db_url


def create_store_engine(db_url: str) -> Engine:
    """Return an Engine for db_url, pinned to one connection when in-memory."""
    kwargs: dict = {}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if is_in_memory(db_url):
            kwargs["poolclass"] = StaticPool
    return create_engine(db_url, **kwargs)
