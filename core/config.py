"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the auth service happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead, or accept a Settings instance as a constructor argument.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  frozen=True: Settings is immutable once constructed. TokenIssuer and
      AuthService receive the instance explicitly and can rely on the secret
      and TTL never changing under them.

Security notes:
  A missing SECRET_KEY is always a hard startup failure. There is no dev-mode
  fallback key: the service must never issue tokens signed with an empty,
  default, or throwaway secret.

  SECRET_KEY shorter than 32 chars is rejected outright. HS256 signing relies
  on key entropy -- a short key weakens every token issued.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("credauth.config")

_MIN_SECRET_LENGTH = 32
_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'auth' / 'credauth_users.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    secret_key has an empty-string default only so the validator can produce
    a clear error message; an instance with an empty key is never returned.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    secret_key: str = Field(default="", repr=False)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # 1 hour. Tokens are never revoked server-side, so the TTL is the only
    # bound on how long a leaked token stays usable.
    token_expire_seconds: int = Field(default=3600, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Off by default: login reports "User not found" (404) and
    # "Invalid password" (401) separately. When on, both become a single
    # 401 "Invalid credentials" with timing equalization.
    uniform_login_errors: bool = False

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Refuse to build a Settings object without a usable signing secret."""
        if not self.secret_key:
            raise ValueError(
                "SECRET_KEY is required. "
                "Set SECRET_KEY in your environment or .env file before starting the service."
            )
        if len(self.secret_key) < _MIN_SECRET_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {_MIN_SECRET_LENGTH} characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logger.debug(
        "Settings loaded (token_expire_seconds=%d, bcrypt_rounds=%d, uniform_login_errors=%s)",
        settings.token_expire_seconds,
        settings.bcrypt_rounds,
        settings.uniform_login_errors,
    )
    return settings
