"""
Centralized configuration for the Depot backend.

All environment variables and settings should be defined here
to avoid duplication across modules.
"""
import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    # CORS - comma-separated list of allowed origins
    ALLOWED_ORIGINS: list = os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")

    # File storage
    DATA_DIR: str = os.environ.get("DEPOT_DATA_DIR", "data")

    # Full-state JSON document
    STATE_PATH: str = os.environ.get(
        "DEPOT_STATE_PATH", os.path.join(DATA_DIR, "state.json")
    )

    # Matching config; empty means the module's reconcile_config.json
    CONFIG_PATH: str = os.environ.get("DEPOT_CONFIG_PATH", "")

    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
