"""
Configuration management for the job board.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobboard.utils.constants import (
    APP_NAME,
    DEFAULT_INTERVIEW_DURATION,
    DEFAULT_PAGE_SIZE,
    LOCATION_NOT_AVAILABLE,
    MAX_PAGE_SIZE,
    NOTIFICATION_LINK_TEMPLATE,
)


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = APP_NAME
    username: Optional[str] = None
    password: Optional[str] = None
    # Multi-document transactions need a replica set
    replica_set: Optional[str] = None


class ApplicantSettings(BaseSettings):
    """Applicant listing and status pipeline behaviour."""

    model_config = SettingsConfigDict(env_prefix="APPLICANTS_")

    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE

    # When False any status may be set from any other status
    enforce_status_pipeline: bool = False

    default_interview_duration: int = DEFAULT_INTERVIEW_DURATION
    location_not_available: str = LOCATION_NOT_AVAILABLE
    notification_link_template: str = NOTIFICATION_LINK_TEMPLATE

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "ApplicantSettings":
        """Default page size must fit under the maximum."""
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")
        return self

    @field_validator("notification_link_template")
    @classmethod
    def validate_link_template(cls, v: str) -> str:
        if "{application_id}" not in v:
            raise ValueError("notification_link_template must contain {application_id}")
        return v


class APISettings(BaseSettings):
    """HTTP API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "jobboard.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "jobboard"
    version: str = "0.1.0"
    description: str = "Job board applicant search and status pipeline"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    applicants: ApplicantSettings = Field(default_factory=ApplicantSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
