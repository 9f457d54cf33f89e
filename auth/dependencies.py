"""
auth/dependencies.py -- Bearer-token authentication helpers.

authenticate_request() runs for every request from the middleware in
api/main.py: it validates an "Authorization: Bearer <token>" header and
records the token's "name" claim on request.state.username (None when the
header is missing or the token is invalid). Anonymous requests are not
rejected here -- only routes that depend on get_current_username() require
a valid token.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.tokens import decode_access_token


def bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate_request(request: Request) -> str | None:
    """Validate the bearer token (if any) and store the caller's username.

    Never raises. Returns the username, or None for anonymous requests.
    """
    username: str | None = None
    token = bearer_token(request)
    if token:
        payload = decode_access_token(token)
        if payload:
            username = payload["name"]
    request.state.username = username
    return username


def get_current_username(request: Request) -> str:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(username: str = Depends(get_current_username)): ...
    """
    username = getattr(request.state, "username", None)
    if username is None:
        username = authenticate_request(request)
    if username is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return username
