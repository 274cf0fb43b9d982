"""Centralized configuration from environment variables.

All configuration that varies between environments (local dev, CI, production)
is read from environment variables here. Import from this module instead of
reading os.environ directly in service code.
"""
import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./database.sqlite")

    # Backups
    BACKUP_DIR: str = os.getenv("BACKUP_DIR", "./backups")

    # Settings table read cache
    SETTINGS_CACHE_TTL_SECONDS: float = float(os.getenv("SETTINGS_CACHE_TTL_SECONDS", "300"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Seed default stock and packaging on an empty database
    SEED_DEFAULTS: bool = os.getenv("SEED_DEFAULTS", "true").lower() in ("1", "true", "yes")

    # CORS
    CORS_ORIGINS: list[str] = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
