"""
API request and response models for the auth service REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Separation of concerns: auth/ models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import Failure

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for register (POST) and login (PUT) on /api/v1/auth.

    Both fields are optional at the schema level: a missing or empty field
    is a 400 decided by AuthService, not a 422 from Pydantic.
    """

    email: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)

    @field_validator("email", "password")
    @classmethod
    def require_utf8(cls, value: Optional[str]) -> Optional[str]:
        """Reject strings holding lone surrogates (e.g. a JSON "\\ud800" escape).

        They parse as valid JSON but cannot be encoded as UTF-8, which both
        bcrypt and the database driver need.
        """
        if value is not None:
            try:
                value.encode("utf-8")
            except UnicodeEncodeError:
                raise ValueError("must be valid UTF-8 text") from None
        return value


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """Response for a successful register (201) or login (200)."""

    model_config = ConfigDict(frozen=True)

    token: str


class UserClaims(BaseModel):
    """Identity claims as embedded in the token at issuance."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    iat: int
    exp: int


class ProfileResponse(BaseModel):
    """Response for GET /api/v1/auth."""

    model_config = ConfigDict(frozen=True)

    user: UserClaims


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

    @classmethod
    def from_failure(cls, failure: Failure) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=failure.kind.value, message=failure.message))


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
