"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures all application settings from environment variables with
validation and defaults. Supports .env files for local development.
"""

import re
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Push Relay", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    stage: str = Field(default="dev", description="Deployment stage")

    # DynamoDB settings
    messages_table_name: str = Field(
        default="fcm_messages",
        description="Name of the DynamoDB table holding trigger documents"
    )
    message_ttl_seconds: int = Field(
        default=86400,
        ge=60,
        description="Lifetime of a trigger document before DynamoDB TTL expires it"
    )

    # Firebase Cloud Messaging settings
    firebase_credentials_path: Optional[str] = Field(
        default=None,
        description="Path to a service account JSON file (application default credentials when unset)"
    )
    firebase_project_id: Optional[str] = Field(
        default=None,
        description="Firebase project ID override"
    )
    fcm_timeout: int = Field(
        default=10,
        ge=1,
        le=30,
        description="HTTP timeout in seconds for FCM send requests"
    )
    fcm_dry_run: bool = Field(
        default=False,
        description="Validate messages with FCM without delivering them"
    )

    # Metrics settings
    metrics_enabled: bool = Field(default=True, description="Publish CloudWatch metrics")
    metrics_namespace: str = Field(default="PushRelay", description="CloudWatch metrics namespace")

    @field_validator('messages_table_name')
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Validate DynamoDB table name."""
        if not v or not isinstance(v, str):
            raise ValueError("Table name must be a non-empty string")

        # DynamoDB allows letters, numbers, dots, hyphens and underscores
        if not re.match(r'^[a-zA-Z0-9_.-]{3,255}$', v):
            raise ValueError(
                "Table name must be 3-255 letters, numbers, dots, hyphens, or underscores"
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
