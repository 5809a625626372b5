"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures all relay settings from environment variables with
validation and defaults. Supports .env files for local development.
"""

import re
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MAX_FAILURE_COUNT = 5


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Webhook Relay", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    stage: str = Field(default="dev", description="Deployment stage")

    # DynamoDB settings
    subscriptions_table_name: str = Field(
        default="webhook-relay-subscriptions",
        description="Name of the DynamoDB subscriptions table"
    )

    # Security settings
    signing_secret: Optional[str] = Field(
        default=None,
        description="Shared secret used to sign every inbound request"
    )

    # Delivery settings
    max_failure_count: int = Field(
        default=DEFAULT_MAX_FAILURE_COUNT,
        ge=1,
        description="Delivery attempts per subscriber before it is unsubscribed"
    )
    delivery_timeout: int = Field(
        default=10,
        ge=1,
        le=30,
        description="HTTP timeout in seconds for each delivery attempt"
    )
    metrics_enabled: bool = Field(
        default=False,
        description="Publish delivery metrics to CloudWatch"
    )

    @field_validator('subscriptions_table_name')
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Validate DynamoDB table name."""
        if not v or not isinstance(v, str):
            raise ValueError("Table name must be a non-empty string")

        if not re.match(r'^[a-zA-Z0-9_.-]+$', v):
            raise ValueError(
                "Table name must contain only letters, numbers, dots, hyphens, and underscores"
            )

        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
