"""
inventory/models.py -- Domain dataclass for the rental fleet.

Pure data container with zero logic. Persistence lives in inventory/store.py;
the HTTP contract lives in api/models.py.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Car:
    """A rentable car.

    id is None (or 0) before the record is written; the store assigns the
    next free id in that case and keeps any other caller-supplied value.
    """

    make: str
    model: str
    year: int
    price: Decimal
    id: Optional[int] = None
