"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance throughout the application lifecycle. The
application factory also accepts an explicit Settings instance, which is
how tests run against isolated configuration.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Security Considerations:
-----------------------
- Never commit .env files to version control
- The default API_KEY is for demos only; set a real one in production

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
        api_key: Shared secret expected in the x-api-key header
        seed_sample_data: Load the sample catalog at start-up
        products_file: Optional JSON file replacing the sample catalog
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> print(settings.app_name)
        'Products API'
        >>> print(settings.is_production)
        False
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
        default="Products API",
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
    # API KEY SETTINGS
    # =========================================================================
    api_key: str = Field(
        default="your-secret-api-key-123",
        min_length=1,
        description="Shared secret required for catalog mutations"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    seed_sample_data: bool = Field(
        default=True,
        description="Seed the catalog with sample products at start-up"
    )

    products_file: Optional[str] = Field(
        default=None,
        description="Path to a JSON list of products used instead of the sample"
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
        """
        Validate and normalize application environment.

        Args:
            value: Raw environment value

        Returns:
            Lowercase normalized environment name
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def include_error_details(self) -> bool:
        """Whether error responses carry a stack trace."""
        return not self.is_production

    @property
    def products_path(self) -> Optional[Path]:
        """
        Get the seed file as a Path object.

        Returns:
            Path to the products JSON file, or None when unset
        """
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

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
