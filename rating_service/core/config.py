"""
Application configuration settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Subject Rating API"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Rating engine
    # Upper bound on completed ratings read when rebuilding the global aggregate.
    # The store returns the entries with the largest aggregate totals first.
    RATING_SAMPLE_SIZE: int = Field(
        default=50,
        ge=1,
        description="Maximum number of completed ratings sampled per subject",
    )

    # Subject listings
    SUBJECTS_PAGE_SIZE: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of subject summaries returned per page",
    )

    # Caller identity headers set by the authenticating gateway
    USER_ID_HEADER: str = "X-User-Id"
    USER_NAME_HEADER: str = "X-User-Name"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )


settings = Settings()
