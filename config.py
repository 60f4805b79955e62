"""
Configuration settings for the study planner.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

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

    # ========================================
    # Progress Service
    # ========================================
    progress_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the progress-tracking service",
    )
    progress_api_key: str | None = Field(
        default=None,
        description="API key sent to the progress service (X-API-Key)",
    )
    progress_api_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Progress service request timeout in seconds",
    )
    progress_exam_session_limit: int = Field(
        default=10,
        ge=1,
        description="Recent exam sessions fetched for state analysis",
    )

    # ========================================
    # Planner
    # ========================================
    planner_base_hours: float = Field(
        default=120.0,
        gt=0,
        description="Study hours for a full course at 100% target proficiency",
    )
    planner_mock_exam_probability: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Chance a non-weak session becomes a mock exam",
    )
    planner_random_seed: int | None = Field(
        default=None,
        description="Seed for reproducible session generation (None for random)",
    )

    # ========================================
    # Locale
    # ========================================
    default_timezone: str = Field(
        default="Europe/Madrid",
        description="Timezone for default availability",
    )
    default_locale: str = Field(
        default="es-ES",
        description="Locale for default availability",
    )

    # ========================================
    # Plan Cache
    # ========================================
    plan_cache_ttl_seconds: int = Field(
        default=900,
        ge=0,
        description="How long a generated plan is reused for the same user and course",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
