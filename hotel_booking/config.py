"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the hotel booking service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./hotels.db",
        description="SQLAlchemy database URL. PostgreSQL and MSSQL URLs select those backends.",
    )
    store_backend: Literal["sql", "memory"] = Field(
        default="sql",
        description="Which HotelStore adapter serves requests.",
    )
    run_db_migrations: bool = Field(
        default=False,
        description="Whether the service should create database tables on startup.",
    )
    service_api_key: str = Field(default="service-key", description="API key guarding /seed and /reset")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="30/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    hotel_search_cache_ttl: int = Field(default=60, description="TTL (s) for cached hotel search results")
    seed_hotel_count: int = Field(default=50, ge=0, description="Number of hotels created by /seed")
    seed_random_seed: Optional[int] = Field(
        default=None,
        description="Fixed seed for demo data generation. Unset means a fresh generator per run.",
    )
    log_dir: str = Field(default="logs", description="Directory for the HTTP audit log files")

    hotels_service_port: int = 8005


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
