"""
Configuration management using pydantic-settings.

Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "data" / "claims.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Damage detection service
    damage_detection_api_url: Optional[str] = Field(
        default=None,
        description="Base URL of the damage detection service (POST {url}/detect)",
    )
    damage_detection_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for damage detection requests",
    )

    # Claim storage
    claims_db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        description="SQLite database file holding submitted claims",
    )
    ensure_unique_ids: bool = Field(
        default=False,
        description="Redraw claim IDs that already exist in the store",
    )

    log_level: str = Field(default="INFO", description="Logging level for scripts")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading environment on every call.
    """
    return Settings()
