"""
auth/models.py -- Domain dataclass for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors
inventory/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """An account that can log in.

    username is the lookup key. Uniqueness is not enforced; lookups return the
    earliest matching record.

    password_hash is a bcrypt hash for seeded users, but it is only compared
    when ENFORCE_PASSWORD_CHECK is on. Any string is accepted as a value.
    """

    username: str
    password_hash: str
    id: int | None = None
