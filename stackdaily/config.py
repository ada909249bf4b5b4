from __future__ import annotations

import sys
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (empty = no relational store configured)
    database_url: str = ""
    log_sql: bool = False

    # Server
    environment: str = "development"
    log_level: str = "info"
    log_format: str = "json"
    allow_cors_origins: List[str] = ["*"]

    # Spreadsheet (Google Apps Script web app)
    sheets_webhook_url: str = ""
    storage_timeout_seconds: float = 8.0

    # Avatar proxy
    avatar_base_url: str = "https://unavatar.io/twitter"
    avatar_timeout_seconds: float = 5.0
    avatar_rate_limit: str = "60/minute"

    # Submission rate limiting
    submit_max_requests: int = 5
    submit_window_seconds: float = 60.0
    rate_limit_sweep_seconds: float = 60.0

    # Field encryption (Fernet key)
    encryption_key: str = Field(default="", validate_default=True)

    @field_validator("encryption_key")
    @classmethod
    def validate_encryption_key(cls, v: str, info) -> str:
        """Refuse to start outside development without an encryption key."""
        env = info.data.get("environment", "development")
        if env != "development" and not v:
            print(
                "\n🚨 FATAL: STACKDAILY_ENCRYPTION_KEY is not set.\n"
                "   Contact fields would be stored in plain text.\n"
                "   Generate one with: python -c \"from cryptography.fernet import Fernet; "
                "print(Fernet.generate_key().decode())\"\n",
                file=sys.stderr,
            )
            raise ValueError(
                "Encryption key is required in non-development environments. "
                "Set STACKDAILY_ENCRYPTION_KEY env var."
            )
        return v

    class Config:
        env_prefix = "STACKDAILY_"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Module-level singleton for convenience
settings = get_settings()
