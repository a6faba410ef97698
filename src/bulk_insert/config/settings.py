"""
Configuration management for bulk_insert.

Environment-based configuration using Pydantic BaseSettings. Values are read
from process environment variables and, when present, from a ``.env`` file at
the project root (override the location with ``BULK_INSERT_ENV_FILE``).
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("BULK_INSERT_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields:
    - DATABASE_URL: SQLAlchemy URL used when no connection is passed explicitly
    - LOG_LEVEL: Logging level (uppercase)
    - LOG_TO_FILE: Enable rotating file logging in addition to stdout
    - LOG_FILE_DIR: Directory for log files
    - BULK_INSERT_SET_SIZE: Default number of rows buffered per INSERT
    """

    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )
    LOG_TO_FILE: bool = Field(
        default=False,
        validation_alias="LOG_TO_FILE",
        description="Write logs to a daily rotating file as well as stdout",
    )
    LOG_FILE_DIR: str = Field(
        default="logs",
        validation_alias="LOG_FILE_DIR",
        description="Directory for log files",
    )
    BULK_INSERT_SET_SIZE: int = Field(
        default=500,
        gt=0,
        validation_alias="BULK_INSERT_SET_SIZE",
        description="Rows buffered before an automatic flush",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def _normalize_postgres_scheme(cls, value: Optional[str]) -> Optional[str]:
        # SQLAlchemy no longer accepts the postgres:// alias
        if value and value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    model_config = SettingsConfigDict(
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
