"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the Suki API using Pydantic Settings.

A single Settings instance is shared through ``get_settings()``.

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Required Values:
---------------
- DATABASE_URL: connection string of the hosted Postgres database
- DATABASE_KEY: access key for that database

Startup fails when either is missing or still holds a placeholder such as
``YOUR_DATABASE_KEY``.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy connection string for the hosted database
        database_key: Access key for the hosted database
        create_tables: Create missing tables on startup
        catalog_backend: Product catalog source ("memory" or "database")
        products_file: Optional JSON file replacing the sample catalog
        points_rate: Loyalty points earned per currency unit spent
        short_code_ttl_minutes: Lifetime of an issued short code
        code_sweep_enabled: Run the expired-code sweeper
        code_sweep_interval_seconds: Sweeper interval
        cors_origins: Allowed CORS origins (JSON array string)
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Suki API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        ...,
        min_length=1,
        description="SQLAlchemy connection string of the hosted database"
    )

    database_key: str = Field(
        ...,
        min_length=1,
        description="Access key for the hosted database"
    )

    create_tables: bool = Field(
        default=False,
        description="Create missing tables on startup"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    catalog_backend: str = Field(
        default="memory",
        description="Product catalog source: memory or database"
    )

    products_file: Optional[str] = Field(
        default=None,
        description="JSON file replacing the built-in sample catalog"
    )

    # =========================================================================
    # LOYALTY SETTINGS
    # =========================================================================
    points_rate: float = Field(
        default=0.1,
        ge=0,
        le=1,
        description="Points earned per currency unit spent"
    )

    short_code_ttl_minutes: int = Field(
        default=10,
        ge=1,
        le=1440,
        description="Lifetime of an issued short code in minutes"
    )

    code_sweep_enabled: bool = Field(
        default=True,
        description="Periodically purge expired short codes"
    )

    code_sweep_interval_seconds: int = Field(
        default=60,
        ge=5,
        le=3600,
        description="Expired-code sweep interval in seconds"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize the environment name, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("database_url", "database_key")
    @classmethod
    def reject_placeholders(cls, value: str) -> str:
        """
        Reject template values copied verbatim from an example .env file.

        Raises:
            ValueError: If the value is blank or still a placeholder
        """
        value = value.strip()
        if not value:
            raise ValueError("value is required")
        if "YOUR_" in value or "your_" in value:
            raise ValueError("placeholder value must be replaced")
        return value

    @field_validator("catalog_backend")
    @classmethod
    def validate_catalog_backend(cls, value: str) -> str:
        """
        Validate the catalog backend name.

        Raises:
            ValueError: If the backend is not supported
        """
        supported = {"memory", "database"}
        normalized = value.lower().strip()

        if normalized not in supported:
            raise ValueError(
                f"Unsupported catalog backend: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return normalized

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def products_path(self) -> Optional[Path]:
        """Products override file as a Path, or None when unset."""
        if not self.products_file:
            return None
        return Path(self.products_file)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    @property
    def database_key_preview(self) -> str:
        """First characters of the access key, safe for logs."""
        return f"{self.database_key[:8]}..."

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"catalog_backend={self.catalog_backend!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Returns:
        Global Settings instance

    Raises:
        pydantic.ValidationError: If required credentials are missing
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
