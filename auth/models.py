"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, near-zero logic). Dataclasses own
domain shape; the store, service, and routes do the work.

AuthResult is a two-variant union (Success | Failure). The service returns
one of these for every call instead of raising, so the HTTP layer maps
results to responses without try/except around expected outcomes.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ErrorKind(str, Enum):
    """Failure taxonomy. The value is the machine-readable error code."""

    VALIDATION = "validation_error"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "unauthorized"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self]


_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.AUTHENTICATION: 401,
}


@dataclass
class UserRecord:
    """A registered user as persisted in the users table.

    id and created_at are assigned by the store on insert and are None on a
    record that has not been written yet. password_hash is the full bcrypt
    string -- the plaintext never reaches this object.
    """

    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Credential:
    """Email + plaintext password pair from a register or login request.

    Request-scoped only. repr=False on password keeps it out of logs and
    tracebacks.
    """

    email: str | None
    password: str | None = field(repr=False)

    def is_complete(self) -> bool:
        return bool(self.email) and bool(self.password)


@dataclass(frozen=True)
class Claims:
    """Identity claims embedded in a signed token.

    issued_at / expires_at are epoch seconds (the JWT iat / exp claims).
    """

    subject_id: int
    email: str
    issued_at: int
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        """Return the claims under their on-the-wire names."""
        return {
            "id": self.subject_id,
            "email": self.email,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


@dataclass(frozen=True)
class Success:
    status_code: int
    payload: dict[str, Any]

    ok = True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    ok = False

    @property
    def status_code(self) -> int:
        return self.kind.status_code


AuthResult = Union[Success, Failure]
