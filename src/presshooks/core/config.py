"""Configuration management for presshooks.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once when
the engine is built and is immutable during runtime.
"""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRESSHOOKS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "presshooks"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Hook Engine Settings
    default_priority: int = Field(
        default=10,
        description="Priority used when a callback is registered without one",
    )
    strict_arity: bool = Field(
        default=False,
        description="Raise instead of warn when a dispatch supplies the wrong argument count",
    )

    # Plugin Settings
    plugins_dir: str | None = Field(
        default=None,
        description="Directory holding one sub-directory per plugin",
    )
    active_plugins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Plugin slugs enabled at startup, in order",
    )

    @field_validator("active_plugins", mode="before")
    @classmethod
    def parse_active_plugins(cls, v: str | list[str]) -> list[str]:
        """Parse active plugins from a JSON list, a comma-separated string or a list."""
        if isinstance(v, str) and v.strip().startswith("["):
            return json.loads(v)
        if isinstance(v, str):
            return [slug.strip() for slug in v.split(",") if slug.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
