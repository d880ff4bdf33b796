"""
Application settings management.

Loads configuration for the Dex API connection, search caching and logging
from environment variables (and an optional .env file).
"""

import os
from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DEX_API_BASE_URL = "https://api.getdex.com/api/rest"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dex API Configuration
    dex_api_key: Optional[str] = Field(
        default=None,
        description="Dex API key sent as x-hasura-dex-api-key"
    )
    dex_api_base_url: str = Field(
        default=DEFAULT_DEX_API_BASE_URL,
        description="Dex REST API base URL"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single Dex API request"
    )

    # Cache Configuration
    dex_search_cache_ttl_minutes: float = Field(
        default=30,
        description="Minutes before the full-text search index is rebuilt"
    )
    contacts_cache_ttl_minutes: float = Field(
        default=5,
        description="Minutes before the contact list used for matching is reloaded"
    )

    # HTTP API Configuration
    api_host: str = Field(default="localhost", description="API server host")
    api_port: int = Field(default=8120, description="API server port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Path to log file")

    # Application version
    version: str = Field(default="0.1.0", description="Server version")

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        if v is None or str(v).strip() == "":
            return None
        path_str = str(v)
        if path_str.startswith("~"):
            path_str = os.path.expanduser(path_str)
        return Path(path_str)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("dex_search_cache_ttl_minutes", "contacts_cache_ttl_minutes")
    @classmethod
    def validate_ttl(cls, v):
        """Cache lifetimes cannot be negative."""
        if v < 0:
            raise ValueError("Cache TTL must be >= 0 minutes")
        return v

    @field_validator("dex_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    def ensure_directories(self):
        """Create the log directory if a log file is configured."""
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def masked_api_key(self) -> str:
        """Return the API key with all but the last four characters hidden."""
        if not self.dex_api_key:
            return "<not set>"
        return "*" * max(len(self.dex_api_key) - 4, 0) + self.dex_api_key[-4:]


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Creates and caches the settings on first call.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.ensure_directories()
    return _settings


def reset_settings():
    """Reset the global settings instance (mainly for testing)."""
    global _settings
    _settings = None
