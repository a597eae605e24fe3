"""
Application configuration.
Settings are read from the environment once a .env file has been loaded.
"""
import os
from functools import lru_cache
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator


class Settings(BaseModel):
    """Runtime settings for the back office."""

    APP_NAME: str = "Back Office"
    BUSINESS_NAME: str = "WHIZ POS"

    # Database
    MONGODB_URI: Optional[str] = None
    DB_NAME: str = "backoffice"
    SERVERLESS: bool = False
    DB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    DB_GUARD_WAIT_SECONDS: float = 5.0

    # Sessions
    SESSION_SECRET: str = "backoffice-session-secret"
    SESSION_MAX_AGE: int = 24 * 60 * 60

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    PORT_RETRY_LIMIT: int = 10
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    @field_validator("MONGODB_URI", "LOG_FILE", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        """Accept a comma separated list of origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("PORT_RETRY_LIMIT")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("PORT_RETRY_LIMIT must be >= 1")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance; variables that are not set keep their defaults
        """
        environ = os.environ if environ is None else environ
        values = {name: environ[name] for name in cls.model_fields if name in environ}
        return cls(**values)


@lru_cache()
def get_settings() -> Settings:
    """Load .env (if present) and return the cached process settings."""
    load_dotenv()
    return Settings.from_env()
