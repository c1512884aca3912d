"""
api/routes/v1/auth.py -- Register, login, and profile REST endpoints.

Routes (one resource, three verbs):
  POST /api/v1/auth   -- register {email, password}; 201 {token}
  PUT  /api/v1/auth   -- login {email, password};    200 {token}
  GET  /api/v1/auth   -- profile from Authorization: Bearer <token>; 200 {user}

Handlers are plain `def`, not `async def`. FastAPI runs them in its worker
threadpool, which keeps bcrypt's deliberate CPU cost and the blocking
SQLAlchemy calls off the event loop.

Security:
  Cache-Control: no-store on every response carrying a token.
  Failure responses use the shared {"error": {code, message}} envelope.
  That differs from earlier deployments of this API, whose failure bodies
  were a bare {"message": ...}; clients must read body.error.message.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from api.models import (
    CredentialsRequest,
    ErrorResponse,
    ProfileResponse,
    TokenResponse,
)
from auth.dependencies import get_auth_service
from auth.models import AuthResult, Failure
from auth.service import AuthService

# Auth policy:
# - POST /api/v1/auth: public -- registration
# - PUT  /api/v1/auth: public -- login
# - GET  /api/v1/auth: bearer token checked by AuthService.fetch_profile
router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post("/auth", response_model=TokenResponse, status_code=201, responses=_ERROR_RESPONSES)
def register(
    body: Optional[CredentialsRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Create a user and return a token for it."""
    body = body or CredentialsRequest()
    return _to_response(service.register(body.email, body.password), no_store=True)


@router.put("/auth", response_model=TokenResponse, responses=_ERROR_RESPONSES)
def login(
    body: Optional[CredentialsRequest] = None,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Check email + password and return a fresh token."""
    body = body or CredentialsRequest()
    return _to_response(service.login(body.email, body.password), no_store=True)


@router.get("/auth", response_model=ProfileResponse, responses=_ERROR_RESPONSES)
def profile(
    authorization: Optional[str] = Header(default=None),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Return the identity claims carried by the bearer token."""
    return _to_response(service.fetch_profile(authorization))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_response(result: AuthResult, no_store: bool = False) -> JSONResponse:
    if isinstance(result, Failure):
        resp = JSONResponse(
            status_code=result.status_code,
            content=ErrorResponse.from_failure(result).model_dump(exclude_none=True),
        )
        if result.status_code == 401:
            resp.headers["WWW-Authenticate"] = "Bearer"
    else:
        resp = JSONResponse(status_code=result.status_code, content=result.payload)
    if no_store:
        resp.headers["Cache-Control"] = "no-store"
    return resp
