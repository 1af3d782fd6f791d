"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Every field has a default except
``secret_key``: the token signing secret must be supplied by the
deployment and the application refuses to start without it (see
``main.create_app``).
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Finance Ledger API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Shared HMAC secret used to sign and verify bearer tokens.
    secret_key: str = os.getenv("SECRET_KEY", "")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "5"))

    # bcrypt work factor.  10 matches the cost existing hashes were
    # created with; tests lower it to keep the suite fast.
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "finance_ledger.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# therefore be set before importing this module.
settings = Settings()
