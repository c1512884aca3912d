"""
tests/conftest.py -- Shared test fixtures for the auth service.

This module provides:
  - settings / store / issuer / service: unit-level building blocks with an
    in-memory SQLite store and a cheap bcrypt cost factor
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - api_client: TestClient against the real FastAPI app and routes

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient fixture because route handlers run in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread.

SECRET_KEY must be set before any api/ import: get_settings() is called by
the real lifespan and refuses to build Settings without it.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set SECRET_KEY before any core/api import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef-0123456789")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import Settings

TEST_SECRET = "unit-test-secret-key-abcdefghijklmnopqrstuvwxyz"

# Cost 4 is bcrypt's minimum. Unit tests exercise the logic, not the cost.
TEST_ROUNDS = 4


def make_settings(**overrides) -> Settings:
    values = {"secret_key": TEST_SECRET, "bcrypt_rounds": TEST_ROUNDS}
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture
def issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(settings)


@pytest.fixture
def service(store: UserStore, issuer: TokenIssuer, settings: Settings) -> AuthService:
    return AuthService(store, issuer, settings)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(settings: Settings, user_store: UserStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.user_store = user_store
        app.state.token_issuer = TokenIssuer(settings)
        app.state.auth_service = AuthService(user_store, app.state.token_issuer, settings)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, TokenIssuer], None, None]:
    """Yield (client, issuer) for API integration tests.

    Each test module gets its own named in-memory database so registrations
    in one module never collide with another.
    """
    settings = make_settings()
    db_name = f"test_auth_{uuid.uuid4().hex}"
    user_store = UserStore(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")

    app.router.lifespan_context = _patch_lifespan(settings, user_store)

    # base_url host must pass TrustedHostMiddleware.
    with TestClient(app, base_url="http://localhost", raise_server_exceptions=True) as client:
        yield client, TokenIssuer(settings)

    user_store.close()
