"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings so the service boots with
      an in-memory cache and no database
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Envato API
    envato_api_base_url: str = "https://api.envato.com"
    envato_api_token: str = "envato-token-placeholder"
    envato_timeout_seconds: int = 30
    envato_max_retries: int = 3
    envato_base_delay_ms: int = 1000
    envato_max_delay_ms: int = 30_000

    # Reports
    statement_max_pages: int = 200
    sales_display_limit: int = 50

    # Cache
    cache_backend: Literal["memory", "database"] = "memory"
    database_url: str = "postgresql+asyncpg://reports:reports@db:5432/reports"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs use postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 5

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
