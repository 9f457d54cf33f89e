"""
inventory/store.py -- SQLAlchemy Core persistence layer for the car inventory.

Pattern: Repository + Data Mapper. CarStore is the repository; _row_to_car is
the mapper. Route handlers depend on the CarRepository protocol, never on SQL,
so tests can hand the app any object with the same two methods.

Schema notes:
  seq is the surrogate row key and records insertion order. id is the public
  identifier: assigned as max(id) + 1 when the caller leaves it unset (None or
  0), stored verbatim otherwise. The UNIQUE constraint on id turns a duplicate
  caller-supplied id into sqlalchemy.exc.IntegrityError.

  price is stored as TEXT and mapped back to Decimal so no precision is lost
  on SQLite, which has no native decimal type.

Security: all queries use bound parameters. No f-strings in SQL.
"""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal
from typing import Protocol

from sqlalchemy import Column, Integer, MetaData, String, Table, func, select
from sqlalchemy.engine import Engine

from core.db import create_store_engine
from inventory.models import Car

logger = logging.getLogger("carrental.inventory")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_cars = Table(
    "cars",
    _metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", Integer, nullable=False, unique=True),
    Column("make", String(255), nullable=False),
    Column("model", String(255), nullable=False),
    Column("year", Integer, nullable=False),
    Column("price", String(64), nullable=False),  # Decimal as text
)


class CarRepository(Protocol):
    """What the car routes need from a store."""

    def list_cars(self) -> list[Car]: ...

    def create_car(self, car: Car) -> Car: ...


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


def _row_to_car(row) -> Car:
    return Car(
        id=row.id,
        make=row.make,
        model=row.model,
        year=row.year,
        price=Decimal(row.price),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CarStore:
    """Repository for Car entities.

    Usage:
        store = CarStore()                      # private in-memory DB
        car = store.create_car(Car(make="Toyota", model="Corolla", year=2020, price=Decimal("15000")))
        cars = store.list_cars()
        store.close()
    """

    def __init__(self, db_url: str = "sqlite://") -> None:
        self.engine: Engine = create_store_engine(db_url)
        _metadata.create_all(self.engine)

    def list_cars(self) -> list[Car]:
        """Return every car in insertion order."""
        with self.engine.connect() as conn:
            rows = conn.execute(select(_cars).order_by(_cars.c.seq)).fetchall()
        return [_row_to_car(r) for r in rows]

    def create_car(self, car: Car) -> Car:
        """Insert a car and return it with its stored id.

        Raises sqlalchemy.exc.IntegrityError if a caller-supplied id is
        already taken.
        """
        with self.engine.begin() as conn:
            car_id = car.id
            if not car_id:
                car_id = conn.execute(select(func.coalesce(func.max(_cars.c.id), 0) + 1)).scalar_one()
            conn.execute(
                _cars.insert().values(
                    id=car_id,
                    make=car.make,
                    model=car.model,
                    year=car.year,
                    price=str(car.price),
                )
            )
        logger.debug("Stored car id=%d", car_id)
        return dataclasses.replace(car, id=car_id)

    def count(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_cars)).scalar_one()

    def close(self) -> None:
        """Dispose of the engine. In-memory data is gone afterwards."""
        self.engine.dispose()
