"""
API Configuration Management

Provides environment-aware settings for the authentication API with
validation and safe defaults.
"""

import os
from enum import Enum
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class EnvironmentType(str, Enum):
    """Valid environment types for configuration context."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class APISettings(BaseSettings):
    """
    API configuration settings with environment-specific defaults and validation.

    WeChat credentials are configured separately, see
    wechat_auth.config.WechatSettings.
    """
    # Environment Configuration
    ENVIRONMENT: EnvironmentType = Field(
        default=EnvironmentType.DEVELOPMENT,
        description="Runtime environment context"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    # API Settings
    API_TITLE: str = Field(
        default="WeChat Authentication API",
        description="API title for documentation"
    )
    API_DESCRIPTION: str = Field(
        default="OAuth2 login through WeChat",
        description="API description for documentation"
    )
    API_VERSION: str = Field(
        default="1.0.0",
        description="API version"
    )

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed origins for CORS"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize and validate the logging level name."""
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return value

    @property
    def cors_origins(self) -> List[str]:
        """Parse comma-separated CORS origins into list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }


@lru_cache()
def get_settings() -> APISettings:
    """
    Retrieve validated API settings.

    Returns:
        Validated API settings object

    Raises:
        ValidationError: If configuration fails validation
    """
    os.environ.setdefault("ENVIRONMENT", EnvironmentType.DEVELOPMENT.value)
    return APISettings()
