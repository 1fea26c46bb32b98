# src/ratetick/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a local .env file.

Files that USE this module:
- ratetick.app (loads settings for wiring and logging)
- ratetick.adapters.providers.* (base URL and HTTP timeout)
- ratetick.adapters.providers.registry (default provider name)
- ratetick.adapters.persistence.db (database URL)

Files that this module USES:
- ratetick.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from ratetick.shared.validators import (
    validate_http_url,  # Validate provider base URL
    validate_log_level,  # Validate logging level names
    validate_provider_name,  # Validate provider registry names
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Storage ---
    database_url: str = Field(default="sqlite:///./data/ratetick.db", alias="DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # --- Rate sources ---
    default_provider: str = Field(default="binance", alias="DEFAULT_PROVIDER")
    preferred_provider: str = Field(default="binance", alias="PREFERRED_PROVIDER")
    binance_base_url: str = Field(default="https://api.binance.com/api/v3", alias="BINANCE_BASE_URL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Scheduling (read by the external scheduler, not by the engine) ---
    update_frequency_minutes: int = Field(default=5, alias="UPDATE_FREQUENCY_MINUTES", ge=1, le=1440)

    # --- Process lock ---
    pid_file: Path = Field(default=Path("./data/ratetick.pid"), alias="RATETICK_PID_FILE")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="RATETICK_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("default_provider", "preferred_provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Provider names are resolved case-insensitively; store them lower-cased."""
        if not validate_provider_name(v):
            raise ValueError("Invalid provider name format")
        return v.lower()

    @field_validator("binance_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not validate_http_url(v):
            raise ValueError("BINANCE_BASE_URL must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if not validate_log_level(v):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v.upper()


# Global settings instance
settings = Settings()
