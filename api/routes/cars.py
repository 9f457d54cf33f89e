"""
api/routes/cars.py -- Car inventory REST endpoints.

Routes:
  GET  /api/cars  -- list every car in insertion order
  POST /api/cars  -- add a car; 201 with Location pointing at the collection

Auth policy: both routes accept anonymous callers. The authentication
middleware still runs, so a valid bearer token is recognised, but neither
route requires one.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError

from api.models import CarCreate, CarResponse
from inventory.store import CarRepository

logger = logging.getLogger("carrental.inventory")

router = APIRouter()


@router.get("/cars", response_model=list[CarResponse], name="list_cars")
def list_cars(request: Request) -> list[CarResponse]:
    """Return all cars. No pagination, filtering or sorting."""
    store: CarRepository = request.app.state.car_store
    return [CarResponse.from_domain(c) for c in store.list_cars()]


@router.post("/cars", response_model=CarResponse, status_code=201)
def create_car(request: Request, response: Response, body: CarCreate) -> CarResponse:
    """Store a new car and return it with its id.

    A caller-supplied id is kept; a duplicate one is answered with 409.
    """
    store: CarRepository = request.app.state.car_store
    try:
        car = store.create_car(body.to_domain())
    except IntegrityError as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": f"A car with id {body.id} already exists."},
        ) from exc

    response.headers["Location"] = f"{request.app.url_path_for('list_cars')}?id={car.id}"
    logger.info("Car added: id=%d %s %s (%d)", car.id, car.make, car.model, car.year)
    return CarResponse.from_domain(car)
