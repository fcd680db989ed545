"""
Configuration module for the Customs Review Service.
Centralizes database settings, API settings and review scheduler parameters.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Application Settings ────────────────────────────────────────────
    app_name: str = "Customs Review Service"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ─── API Settings ────────────────────────────────────────────────────
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: List[str] = Field(
        default=["http://localhost:5000"],
        description="Origins allowed by the CORS middleware"
    )

    # ─── Database Settings ───────────────────────────────────────────────
    database_url: str
    db_pool_size: int = 10
    db_pool_timeout: int = 30

    # ─── Review Scheduler Settings ───────────────────────────────────────
    review_scheduler_enabled: bool = Field(
        default=True,
        description="Start the background customs review job on boot"
    )
    review_interval_seconds: int = Field(
        default=120,
        gt=0,
        description="Seconds between two review passes"
    )
    review_delay_minutes: float = Field(
        default=5,
        ge=0,
        description="Minutes a declaration stays under review before it is resolved"
    )
    approval_probability: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Probability that a resolved declaration is approved"
    )

    # ─── Helper Methods ──────────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings: Application configuration object
    """
    return Settings()
