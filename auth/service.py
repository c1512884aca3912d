"""
auth/service.py -- Register, Login, and FetchProfile orchestration.

AuthService composes the three leaf pieces -- UserStore, the bcrypt helpers
in auth/passwords.py, and TokenIssuer -- into the three public operations.
Each operation is independent and returns an AuthResult; none of them
raises for an expected failure (bad input, duplicate, unknown user, bad
password, bad token). Unexpected errors (database down) propagate to the
HTTP layer's catch-all handler.

Login error reporting:
  By default Login distinguishes "User not found" (404) from
  "Invalid password" (401). That split lets a caller probe which emails are
  registered. Settings.uniform_login_errors=True collapses both into one
  401 "Invalid credentials" and runs bcrypt against _DUMMY_HASH for unknown
  emails so response time does not reveal account existence either.

FetchProfile trusts the token alone. It does not re-read the store, so a
token stays usable until exp even if the account it names is gone.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from auth.models import AuthResult, Credential, ErrorKind, Failure, Success, UserRecord
from auth.passwords import hash_password, verify_password
from auth.store import DuplicateEmailError

if TYPE_CHECKING:
    from auth.store import UserStore
    from auth.tokens import TokenIssuer
    from core.config import Settings

logger = logging.getLogger("credauth.auth")

BEARER_PREFIX = "Bearer "

MSG_FIELDS_REQUIRED = "Email and password are required"
MSG_USER_EXISTS = "User already exists"
MSG_USER_NOT_FOUND = "User not found"
MSG_INVALID_PASSWORD = "Invalid password"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_UNAUTHORIZED = "Unauthorized"
MSG_INVALID_TOKEN = "Invalid token"


class AuthService:
    """Stateless orchestration of the three auth operations.

    Usage:
        service = AuthService(store, TokenIssuer(settings), settings)
        result = service.register("a@x.com", "pw123")
        if result.ok:
            token = result.payload["token"]
    """

    def __init__(self, store: UserStore, issuer: TokenIssuer, settings: Settings) -> None:
        self.store = store
        self.issuer = issuer
        self.rounds = settings.bcrypt_rounds
        self.uniform_login_errors = settings.uniform_login_errors
        self._dummy_hash: str | None = None
        if self.uniform_login_errors:
            # Computed once up front so the first unknown-email login is not
            # measurably slower than later ones.
            self._dummy_hash = hash_password("credauth_timing_dummy", rounds=self.rounds)

    # ------------------------------------------------------------------
    # Register
    # ------------------------------------------------------------------

    def register(self, email: str | None, password: str | None) -> AuthResult:
        credential = Credential(email=email, password=password)
        if not credential.is_complete():
            return Failure(ErrorKind.VALIDATION, MSG_FIELDS_REQUIRED)

        # Early exit before paying for bcrypt. Not the uniqueness guarantee --
        # that is the UNIQUE constraint behind create_user().
        if self.store.find_by_email(credential.email) is not None:
            return Failure(ErrorKind.CONFLICT, MSG_USER_EXISTS)

        record = UserRecord(
            email=credential.email,
            password_hash=hash_password(credential.password, rounds=self.rounds),
        )
        try:
            record.id = self.store.create_user(record)
        except DuplicateEmailError:
            logger.info("Registration lost insert race for existing email %s", credential.email)
            return Failure(ErrorKind.CONFLICT, MSG_USER_EXISTS)

        token = self.issuer.issue(record.id, record.email)
        logger.info("Registered user %s (id=%s)", record.email, record.id)
        return Success(201, {"token": token})

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login(self, email: str | None, password: str | None) -> AuthResult:
        credential = Credential(email=email, password=password)
        if not credential.is_complete():
            return Failure(ErrorKind.VALIDATION, MSG_FIELDS_REQUIRED)

        user = self.store.find_by_email(credential.email)
        if user is None:
            if self.uniform_login_errors:
                verify_password(credential.password, self._dummy_hash)
                return Failure(ErrorKind.AUTHENTICATION, MSG_INVALID_CREDENTIALS)
            return Failure(ErrorKind.NOT_FOUND, MSG_USER_NOT_FOUND)

        if not verify_password(credential.password, user.password_hash):
            logger.info("Failed login for %s", user.email)
            if self.uniform_login_errors:
                return Failure(ErrorKind.AUTHENTICATION, MSG_INVALID_CREDENTIALS)
            return Failure(ErrorKind.AUTHENTICATION, MSG_INVALID_PASSWORD)

        token = self.issuer.issue(user.id, user.email)
        logger.info("Login: %s (id=%s)", user.email, user.id)
        return Success(200, {"token": token})

    # ------------------------------------------------------------------
    # FetchProfile
    # ------------------------------------------------------------------

    def fetch_profile(self, authorization: str | None) -> AuthResult:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return Failure(ErrorKind.AUTHENTICATION, MSG_UNAUTHORIZED)

        # Only the first segment after the scheme is the token; anything
        # after a further space is ignored.
        token = authorization.split(" ")[1]
        claims = self.issuer.verify(token)
        if claims is None:
            return Failure(ErrorKind.AUTHENTICATION, MSG_INVALID_TOKEN)

        return Success(200, {"user": claims.to_dict()})
