"""
API request and response models for the car rental REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
separate from the dataclasses in inventory/models.py and auth/models.py,
which own the internal domain representation. Route handlers map between the
two.

Request models forbid unknown fields and require every field the domain
needs, so a malformed body is rejected at the boundary instead of being
silently defaulted.
"""

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from inventory.models import Car

# Decimal in, JSON number out (pydantic would otherwise emit a string).
# CarCreate only admits prices whose float form is exact, so this is lossless.
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# id and year are 32-bit integers on the wire.
Int32 = Annotated[int, Field(ge=-(2**31), le=2**31 - 1)]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CarCreate(BaseModel):
    """Request body for POST /api/cars.

    id is optional; omit it (or send 0) to have the store assign one. No
    business range checks are applied to year or price: empty strings and
    negative numbers are stored as sent. Only values the JSON response cannot
    carry back unchanged are refused.
    """

    model_config = ConfigDict(extra="forbid")

    id: Optional[Int32] = None
    make: str
    model: str
    year: Int32
    price: Decimal

    @field_validator("price")
    @classmethod
    def price_fits_json_number(cls, value: Decimal) -> Decimal:
        """Reject prices that would come back as null or rounded.

        Responses carry price as a JSON (double) number, so a price must be
        finite and survive the float conversion without losing digits.
        """
        as_float = float(value)
        if not value.is_finite() or as_float in (float("inf"), float("-inf")):
            raise ValueError("price is out of range")
        if Decimal(repr(as_float)) != value:
            raise ValueError("price has more precision than can be represented")
        return value

    def to_domain(self) -> Car:
        return Car(id=self.id, make=self.make, model=self.model, year=self.year, price=self.price)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login.

    No length or content rules: any string is a valid username or password.
    """

    model_config = ConfigDict(extra="forbid")

    username: str
    password: str


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CarResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    make: str
    model: str
    year: int
    price: Price

    @classmethod
    def from_domain(cls, car: Car) -> "CarResponse":
        return cls(id=car.id, make=car.make, model=car.model, year=car.year, price=car.price)


class TokenResponse(BaseModel):
    """Response body for a successful login: {"Token": "<jwt>"}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str = Field(serialization_alias="Token")


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
