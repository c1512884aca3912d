"""Unit tests for auth/service.py -- Register, Login, FetchProfile.

Covers every branch of the three operations against an in-memory store:
- 400 on missing fields, 409 on duplicates (including the insert race),
  404 unknown email, 401 wrong password, 401 on bad Authorization headers
- tokens issued at register/login decode to the registered email and the
  store-assigned id
- FetchProfile trusts claims without re-reading the store
- uniform_login_errors collapses 404/401 into one 401
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from auth.models import ErrorKind, Failure, Success, UserRecord
from auth.passwords import verify_password
from auth.service import AuthService
from auth.store import DuplicateEmailError, UserStore
from auth.tokens import TokenIssuer
from tests.conftest import make_settings


def _token(result) -> str:
    assert isinstance(result, Success), result
    return result.payload["token"]


class TestRegister:
    def test_success_returns_201_with_token(self, service: AuthService, issuer: TokenIssuer, store: UserStore) -> None:
        result = service.register("a@x.com", "pw123")
        assert isinstance(result, Success)
        assert result.status_code == 201
        assert result.ok is True
        claims = issuer.verify(_token(result))
        assert claims.email == "a@x.com"
        assert claims.subject_id == store.find_by_email("a@x.com").id

    def test_stores_hash_not_plaintext(self, service: AuthService, store: UserStore) -> None:
        service.register("a@x.com", "pw123")
        record = store.find_by_email("a@x.com")
        assert record.password_hash != "pw123"
        assert verify_password("pw123", record.password_hash)

    @pytest.mark.parametrize(
        "email,password",
        [(None, "pw"), ("a@x.com", None), ("", "pw"), ("a@x.com", ""), (None, None)],
    )
    def test_missing_fields_are_400(self, service: AuthService, email, password) -> None:
        result = service.register(email, password)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.VALIDATION
        assert result.status_code == 400
        assert result.message == "Email and password are required"

    def test_duplicate_email_is_409(self, service: AuthService) -> None:
        service.register("a@x.com", "pw123")
        result = service.register("a@x.com", "anything-else")
        assert isinstance(result, Failure)
        assert result.status_code == 409
        assert result.message == "User already exists"

    def test_lost_insert_race_is_409(self, issuer: TokenIssuer, settings) -> None:
        # The lookup sees no user, but another request inserts first.
        store = MagicMock(spec=UserStore)
        store.find_by_email.return_value = None
        store.create_user.side_effect = DuplicateEmailError("a@x.com")
        service = AuthService(store, issuer, settings)

        result = service.register("a@x.com", "pw123")
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.CONFLICT
        assert result.status_code == 409

    def test_unexpected_store_error_propagates(self, issuer: TokenIssuer, settings) -> None:
        store = MagicMock(spec=UserStore)
        store.find_by_email.side_effect = RuntimeError("database down")
        service = AuthService(store, issuer, settings)
        with pytest.raises(RuntimeError):
            service.register("a@x.com", "pw123")


class TestLogin:
    def test_success_returns_200_with_token(self, service: AuthService, issuer: TokenIssuer) -> None:
        service.register("a@x.com", "pw123")
        result = service.login("a@x.com", "pw123")
        assert isinstance(result, Success)
        assert result.status_code == 200
        assert issuer.verify(_token(result)).email == "a@x.com"

    def test_unknown_email_is_404(self, service: AuthService) -> None:
        result = service.login("nobody@x.com", "pw123")
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.status_code == 404
        assert result.message == "User not found"

    def test_wrong_password_is_401(self, service: AuthService) -> None:
        service.register("a@x.com", "pw123")
        result = service.login("a@x.com", "wrong")
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.AUTHENTICATION
        assert result.status_code == 401
        assert result.message == "Invalid password"

    def test_email_match_is_case_sensitive(self, service: AuthService) -> None:
        service.register("a@x.com", "pw123")
        assert service.login("A@X.com", "pw123").status_code == 404

    @pytest.mark.parametrize("email,password", [(None, "pw"), ("a@x.com", ""), ("", "")])
    def test_missing_fields_are_400(self, service: AuthService, email, password) -> None:
        result = service.login(email, password)
        assert result.status_code == 400
        assert result.message == "Email and password are required"

    def test_corrupt_stored_hash_is_401_not_crash(self, service: AuthService, store: UserStore) -> None:
        store.create_user(UserRecord(email="legacy@x.com", password_hash="not-a-bcrypt-hash"))
        result = service.login("legacy@x.com", "pw123")
        assert result.status_code == 401


class TestUniformLoginErrors:
    @pytest.fixture
    def hardened(self, store: UserStore) -> AuthService:
        settings = make_settings(uniform_login_errors=True)
        return AuthService(store, TokenIssuer(settings), settings)

    def test_unknown_email_and_wrong_password_look_the_same(self, hardened: AuthService) -> None:
        hardened.register("a@x.com", "pw123")
        unknown = hardened.login("nobody@x.com", "pw123")
        wrong = hardened.login("a@x.com", "wrong")
        assert unknown == wrong
        assert unknown.status_code == 401
        assert unknown.message == "Invalid credentials"

    def test_success_unchanged(self, hardened: AuthService) -> None:
        hardened.register("a@x.com", "pw123")
        assert hardened.login("a@x.com", "pw123").status_code == 200


class TestFetchProfile:
    def test_valid_bearer_returns_claims(self, service: AuthService, store: UserStore) -> None:
        token = _token(service.register("a@x.com", "pw123"))
        result = service.fetch_profile(f"Bearer {token}")
        assert isinstance(result, Success)
        assert result.status_code == 200
        user = result.payload["user"]
        assert user["email"] == "a@x.com"
        assert user["id"] == store.find_by_email("a@x.com").id
        assert user["exp"] - user["iat"] == 3600

    @pytest.mark.parametrize("header", [None, "", "Basic xyz", "bearer abc", "Bearer", "Token abc"])
    def test_missing_or_wrong_scheme_is_unauthorized(self, service: AuthService, header) -> None:
        result = service.fetch_profile(header)
        assert isinstance(result, Failure)
        assert result.status_code == 401
        assert result.message == "Unauthorized"

    def test_invalid_token_is_401(self, service: AuthService) -> None:
        result = service.fetch_profile("Bearer not.a.token")
        assert result.status_code == 401
        assert result.message == "Invalid token"

    def test_empty_token_after_scheme_is_invalid(self, service: AuthService) -> None:
        result = service.fetch_profile("Bearer ")
        assert result.status_code == 401
        assert result.message == "Invalid token"

    def test_double_space_yields_empty_token(self, service: AuthService) -> None:
        token = _token(service.register("a@x.com", "pw123"))
        # split(" ")[1] is the empty string between the two spaces.
        assert service.fetch_profile(f"Bearer  {token}").status_code == 401

    def test_extra_segments_ignored(self, service: AuthService) -> None:
        token = _token(service.register("a@x.com", "pw123"))
        result = service.fetch_profile(f"Bearer {token} trailing-junk")
        assert result.status_code == 200

    def test_profile_does_not_requery_store(self, issuer: TokenIssuer, settings) -> None:
        store = MagicMock(spec=UserStore)
        service = AuthService(store, issuer, settings)
        token = issuer.issue(99, "gone@x.com")
        result = service.fetch_profile(f"Bearer {token}")
        assert result.status_code == 200
        assert result.payload["user"]["email"] == "gone@x.com"
        store.find_by_email.assert_not_called()


def test_register_login_profile_scenario(service: AuthService, issuer: TokenIssuer) -> None:
    t1 = _token(service.register("a@x.com", "pw123"))
    assert issuer.verify(t1).email == "a@x.com"

    t2 = _token(service.login("a@x.com", "pw123"))
    profile = service.fetch_profile("Bearer " + t2)
    assert profile.status_code == 200
    assert profile.payload["user"]["email"] == "a@x.com"

    assert service.register("a@x.com", "other").status_code == 409
