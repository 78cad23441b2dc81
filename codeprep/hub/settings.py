"""Service configuration loaded from CODEPREP_* environment variables."""

from __future__ import annotations

import secrets
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from codeprep.hub.models.enums import Language


class CodePrepSettings(BaseSettings):
    """CodePrep Hub settings.

    All fields are read from environment variables with the ``CODEPREP_``
    prefix.  For example, ``CODEPREP_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CODEPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False
    """Emit one JSON object per log line instead of the coloured text format."""

    # -- Infrastructure --------------------------------------------------------
    database_url: str | None = None
    """PostgreSQL connection string (psycopg).  Required for full operation."""

    # -- Auth ------------------------------------------------------------------
    auth_token: str | None = None
    """Bearer token for API access.  Auto-generated at startup if empty."""

    # -- Editor ----------------------------------------------------------------
    default_language: Language = Language.JAVASCRIPT
    """Language a fresh editor starts in."""
    max_editors_per_user: int = Field(default=20, ge=1)
    """Open editors kept per user; opening one more closes that user's oldest."""

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000

    def resolve_auth_token(self) -> str:
        """Return the configured token or generate a random one."""
        if self.auth_token:
            return self.auth_token
        return secrets.token_urlsafe(32)


@lru_cache(maxsize=1)
def _get_settings_cached() -> CodePrepSettings:
    return CodePrepSettings()


def get_settings() -> CodePrepSettings:
    """Return a cached settings instance.

    Call ``_get_settings_cached.cache_clear()`` in tests to force a re-read
    after overriding env vars.
    """
    return _get_settings_cached()
