"""
api/routes/auth.py -- Authentication REST endpoints.

Routes:
  POST /api/auth/login  -- exchange a username for a signed JWT
  GET  /api/auth/me     -- identity carried by the caller's bearer token

Password checking is off unless ENFORCE_PASSWORD_CHECK=true: by default any
password is accepted once the username exists. api/main.py logs a warning at
startup while the check is disabled.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.models import LoginRequest, MeResponse, TokenResponse
from auth.dependencies import get_current_username
from auth.store import UserRepository
from auth.tokens import authenticate_user, create_access_token
from core.config import get_settings

logger = logging.getLogger("carrental.auth")

# Auth policy:
# - POST /api/auth/login: public -- login endpoint must be unauthenticated
# - GET  /api/auth/me:    requires a valid bearer token (get_current_username)
router = APIRouter()


@router.post("/auth/login", response_model=TokenResponse, responses={401: {"description": "Unknown user"}})
def login(request: Request, body: LoginRequest) -> Response:
    """Issue a one-hour token for an existing username.

    Unknown usernames get 401 with an empty body.
    """
    user_store: UserRepository = request.app.state.user_store
    check_password = get_settings().enforce_password_check
    user = authenticate_user(user_store, body.username, body.password, check_password=check_password)
    if user is None:
        logger.warning("Login refused for username=%r", body.username)
        return Response(status_code=401, headers={"Cache-Control": "no-store"})

    token = create_access_token(user.username)
    logger.info("Token issued for username=%r", user.username)
    resp = JSONResponse(
        status_code=200,
        content=TokenResponse(token=token).model_dump(by_alias=True),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/auth/me", response_model=MeResponse)
def me(username: str = Depends(get_current_username)) -> MeResponse:
    """Return the username from the caller's token."""
    return MeResponse(username=username)
