"""
api/main.py -- FastAPI application entry point for the car rental API.

Run with:  uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware       -- every origin, method and header is allowed
  2. log_requests         -- one access-log line per request
  3. authenticate         -- validates bearer tokens, sets request.state.username

Lifespan creates the in-memory stores on startup (and seeds the optional
account) and disposes of them on shutdown, so all data lives exactly as long
as the process.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.cars import router as cars_router
from auth.dependencies import authenticate_request
from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password
from core.config import Settings, get_settings
from inventory.store import CarStore

__version__ = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("carrental.api")


def seed_user(store: UserStore, settings: Settings) -> bool:
    """Create the SEED_USERNAME account if configured and not yet present.

    Returns True when a user was inserted.
    """
    if not settings.seed_username:
        return False
    if store.get_by_username(settings.seed_username) is not None:
        return False
    store.create_user(User(username=settings.seed_username, password_hash=hash_password(settings.seed_password)))
    logger.info("Seeded user %r", settings.seed_username)
    return True


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the stores on startup and dispose of them on shutdown."""
    # Startup
    logger.info("Car rental API starting up")
    app.state.car_store = CarStore(_settings.database_url)
    app.state.user_store = UserStore(_settings.database_url)
    seed_user(app.state.user_store, _settings)
    if not _settings.enforce_password_check:
        logger.warning("Password check disabled: login accepts any password for an existing username")
    logger.info("Stores initialized (%s)", _settings.database_url)

    yield

    # Shutdown
    app.state.car_store.close()
    app.state.user_store.close()
    logger.info("Car rental API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Car Rental API",
    description="Car inventory and token login over an in-memory store.",
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Each registration wraps everything registered before it, so the last one
# added is the outermost. Registered innermost first.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def authenticate(request: Request, call_next):
    """Attach the bearer token's username (or None) to request.state.

    Invalid tokens are not rejected here; routes that need an identity use
    the get_current_username dependency.
    """
    authenticate_request(request)
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(cars_router, prefix="/api", tags=["Cars"])
app.include_router(auth_router, prefix="/api", tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope. The one exception is a
# refused login, which the route answers with an empty 401 itself.
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when a request body is malformed, incomplete or has unknown fields."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=str(exc.errors()),
            )
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for HTTPExceptions raised by routes and dependencies.

    When detail is already a structured dict, use it directly as the error
    field -- str(dict) would produce a Python repr, not JSON.
    """
    if isinstance(exc.detail, dict):
        content = {"error": exc.detail}
    else:
        content = ErrorResponse(
            error=ErrorDetail(
                code=f"http_{exc.status_code}",
                message=str(exc.detail),
            )
        ).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The traceback goes to the log only; the client gets a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and whether the car store answers a query."""
    try:
        request.app.state.car_store.count()
        database = "ok"
    except Exception:
        logger.exception("Health check: car store unavailable")
        database = "error"
    return HealthResponse(version=__version__, components={"app": "ok", "database": database})
