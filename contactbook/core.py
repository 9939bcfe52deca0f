"""Application configuration and settings management.

This module defines the application settings loaded from environment
variables and provides a helper for accessing cached settings.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Attributes:
        DATABASE_URL: Database connection string.
        LOG_LEVEL: Name of the root logging level.
        ALLOWED_ORIGINS: Allowed origins for CORS.
        REDIS_URL: Redis connection URL used by the rate limiter. When unset
            an in-process fake Redis is used instead.
        RATE_LIMIT_TIMES: Requests allowed per client on registration and login.
        RATE_LIMIT_SECONDS: Window for ``RATE_LIMIT_TIMES``.
    """

    DATABASE_URL: str = "sqlite:///./contactbook.db"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["*"]
    REDIS_URL: str | None = None
    RATE_LIMIT_TIMES: int = 10
    RATE_LIMIT_SECONDS: int = 60

    class Config:
        """Pydantic configuration for loading environment variables."""

        env_file = ".env"
        extra = "allow"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The settings object is cached to prevent reloading environment
    variables multiple times during application lifetime.
    """

    return Settings()
