"""
auth/dependencies.py -- FastAPI Depends() helpers for the auth routes.

The AuthService is built once in the application lifespan and stored on
app.state. Routes obtain it through get_auth_service() so tests can swap the
whole service (or its store) by patching app.state, without touching
module globals.

Layer rule: no imports from api/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService wired up at startup.

    Use as a FastAPI dependency:
        @router.get("/auth")
        def route(service: AuthService = Depends(get_auth_service)): ...
    """
    return request.app.state.auth_service
