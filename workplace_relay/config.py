"""
Configuration Management Module

This module handles all application configuration using Pydantic Settings.
Configuration is loaded from environment variables with strong typing and validation.

Design Decisions:
- Use Pydantic Settings for automatic environment variable loading
- Accept the Workplace app setting names (VerificationToken, AppSecret, ...)
  as well as conventional upper snake case names
- Build settings once and inject them, so tests can substitute their own
- Make the signature checking mode explicit instead of an implicit fallback
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SignatureMode(str, Enum):
    """Whether inbound payload signatures are checked."""
    ENABLED = "enabled"
    DISABLED = "disabled"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values are loaded from environment variables only,
    never hardcoded or logged.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =========================================================================
    # Workplace Configuration
    # =========================================================================
    verification_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("VerificationToken", "verification_token"),
        description="Token expected in hub.verify_token during subscription handshakes"
    )

    app_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AppSecret", "app_secret"),
        description="Workplace app secret used to sign payloads (unset disables checks)"
    )

    access_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AccessToken", "access_token"),
        description="Graph API access token used for name lookups"
    )

    graph_api_base_url: str = Field(
        default="https://graph.facebook.com",
        description="Base URL of the Graph API"
    )

    # =========================================================================
    # Slack Configuration
    # =========================================================================
    slack_webhook_uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SlackWebhookUri", "slack_webhook_uri"),
        description="Slack incoming webhook URL notifications are posted to"
    )

    # =========================================================================
    # HTTP Client Configuration
    # =========================================================================
    http_timeout: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Timeout in seconds for outbound HTTP calls"
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port to bind the server"
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_json_format: bool = Field(
        default=True,
        description="Enable JSON logging format"
    )

    log_requests: bool = Field(
        default=False,
        description="Enable request/response logging"
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("graph_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def signature_mode(self) -> SignatureMode:
        """
        Get the payload signature checking mode.

        An empty or missing app secret disables signature checking, which
        leaves the endpoint open to unsigned requests.
        """
        if self.app_secret:
            return SignatureMode.ENABLED
        return SignatureMode.DISABLED

    @property
    def slack_configured(self) -> bool:
        """Check whether a Slack webhook URL is available."""
        return bool(self.slack_webhook_uri)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache so settings are only loaded once per process.

    Returns:
        Settings instance
    """
    return Settings()
