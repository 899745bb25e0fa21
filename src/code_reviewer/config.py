"""
Configuration settings for the Code Review Service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from typing import Optional

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # === Application ===
    APP_NAME: str = "Code Review Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === Gemini Configuration ===
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GEMINI_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_TIMEOUT: int = 60  # seconds, per remote call

    # === Retry & Backoff ===
    REVIEW_MAX_ATTEMPTS: int = Field(default=5, ge=1)  # Total calls, first one included
    REVIEW_BASE_DELAY_MS: int = Field(default=600, gt=0)
    REVIEW_MAX_DELAY_MS: int = Field(default=8000, gt=0)
    REVIEW_TIMEOUT_SECONDS: float = Field(default=120.0, gt=0)  # Whole review, retries included

    # === HTTP ===
    CORS_ORIGINS: list[str] = ["*"]

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @model_validator(mode="after")
    def _delay_cap_not_below_base(self) -> "Settings":
        if self.REVIEW_MAX_DELAY_MS < self.REVIEW_BASE_DELAY_MS:
            raise ValueError("REVIEW_MAX_DELAY_MS must be >= REVIEW_BASE_DELAY_MS")
        return self
