"""
auth/tokens.py -- Bearer token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with Settings.secret_key and
       carry id (the store-assigned user id), email, iat, and exp. Nothing is
       stored server-side; a token is valid until its exp claim passes.

  Verification is total: verify() returns Claims or None and never raises.
       Bad structure, bad signature, expiry, a foreign algorithm (including
       "none"), and missing claims all produce the same None so callers
       cannot learn why a token was rejected. The reason is logged at DEBUG.

  Settings are injected at construction rather than read at module import,
       so tests and the app can build issuers with different secrets/TTLs
       side by side.

Layer rule: no imports from api/. core.config is imported for the type only.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt

from auth.models import Claims

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("credauth.auth")

ALGORITHM = "HS256"


class TokenIssuer:
    """Signs and verifies identity tokens with a single process-wide secret.

    Usage:
        issuer = TokenIssuer(get_settings())
        token = issuer.issue(42, "a@x.com")
        claims = issuer.verify(token)   # Claims or None
    """

    def __init__(self, settings: Settings) -> None:
        if not settings.secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key.")
        self._secret = settings.secret_key
        self.ttl_seconds = settings.token_expire_seconds

    def issue(self, subject_id: int, email: str) -> str:
        """Encode a signed token for the given user, expiring ttl_seconds from now."""
        issued_at = int(time.time())
        payload = {
            "id": subject_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Claims | None:
        """Decode and validate a token. Returns Claims, or None on any failure."""
        if not isinstance(token, str) or not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError as exc:
            logger.debug("Token rejected: %s", exc)
            return None
        claims = _claims_from_payload(payload)
        if claims is None:
            logger.debug("Token rejected: missing or malformed claims")
            return None
        # jose accepts a token in the exact second it expires; a token is
        # only valid strictly before exp.
        if time.time() >= claims.expires_at:
            logger.debug("Token rejected: expired")
            return None
        return claims


def _claims_from_payload(payload: dict[str, Any]) -> Claims | None:
    subject_id = payload.get("id")
    email = payload.get("email")
    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if isinstance(subject_id, bool) or not isinstance(subject_id, int):
        return None
    if not isinstance(email, str) or not email:
        return None
    if not isinstance(issued_at, int) or not isinstance(expires_at, int):
        return None
    return Claims(subject_id=subject_id, email=email, issued_at=issued_at, expires_at=expires_at)
