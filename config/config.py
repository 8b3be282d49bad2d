"""Configuration classes for the image relay.

This module contains all configuration classes organized by domain.
Configuration is loaded from environment variables and .env files.
"""

import json
from typing import Annotated, Any, List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def str_to_bool(value: Any) -> bool:
    """Convert various string representations to boolean values.

    This function provides consistent boolean conversion from environment variables
    and other string sources. It can be used as a field validator for Pydantic models.

    Args:
        value: The value to convert. Can be bool, str, int, or any other type.

    Returns:
        bool: The converted boolean value.

    Examples:
        >>> str_to_bool("true")
        True
        >>> str_to_bool("0")
        False
        >>> str_to_bool("enabled")
        True
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on", "enabled")
    if isinstance(value, int):
        return bool(value)
    return bool(value)


def str_to_list(value: Any) -> List[str]:
    """Convert a comma-separated or JSON list string to a list of strings.

    Examples:
        >>> str_to_list("https://a.example.com, https://b.example.com")
        ['https://a.example.com', 'https://b.example.com']
        >>> str_to_list('["*"]')
        ['*']
    """
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            value = json.loads(stripped)
        else:
            return [item.strip() for item in stripped.split(",") if item.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ValueError(f"cannot convert {value!r} to a list of strings")


class ServerConfig(BaseSettings):
    """Server configuration settings."""

    # Application metadata
    app_name: str = "Image Relay"
    app_version: str = "1.0.0"

    # Server configuration
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(
        default=3000, validation_alias=AliasChoices("SERVER_PORT", "PORT")
    )
    max_body_bytes: int = Field(default=50 * 1024 * 1024, gt=0, alias="MAX_BODY_BYTES")
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def validate_cors_allow_origins(cls, v) -> List[str]:
        """Accept comma-separated origins as well as a JSON list."""
        return str_to_list(v)


class ProviderConfig(BaseSettings):
    """Inference provider configuration settings."""

    replicate_api_token: str = Field(default="", alias="REPLICATE_API_TOKEN")
    replicate_base_url: str = Field(
        default="https://api.replicate.com/v1", alias="REPLICATE_BASE_URL"
    )
    replicate_model: str = Field(default="google/nano-banana-pro", alias="REPLICATE_MODEL")
    output_format: str = Field(default="jpg", alias="OUTPUT_FORMAT")
    provider_timeout_seconds: float = Field(default=60.0, gt=0, alias="PROVIDER_TIMEOUT_SECONDS")

    # Polling
    poll_interval_seconds: float = Field(default=1.0, ge=0, alias="POLL_INTERVAL_SECONDS")
    poll_timeout_seconds: float = Field(default=300.0, gt=0, alias="POLL_TIMEOUT_SECONDS")

    @field_validator("replicate_base_url")
    @classmethod
    def validate_replicate_base_url(cls, v: str) -> str:
        """Ensure provider URL is properly formatted."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("replicate_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("replicate_model")
    @classmethod
    def validate_replicate_model(cls, v: str) -> str:
        """Model names are `owner/name`."""
        v = v.strip().strip("/")
        if v.count("/") != 1:
            raise ValueError("replicate_model must be in the form owner/name")
        return v

    @property
    def provider_configured(self) -> bool:
        return bool(self.replicate_api_token)


class QuotaConfig(BaseSettings):
    """Daily quota configuration settings."""

    quota_enabled: bool = Field(default=True, alias="QUOTA_ENABLED")
    max_daily_generations: int = Field(default=4, gt=0, alias="MAX_DAILY_GENERATIONS")
    client_ip_header: str = Field(default="X-Forwarded-For", alias="CLIENT_IP_HEADER")

    @field_validator("quota_enabled", mode="before")
    @classmethod
    def validate_quota_enabled(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)


class MonitoringConfig(BaseSettings):
    """Monitoring configuration settings."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_json", mode="before")
    @classmethod
    def validate_log_json(cls, v) -> bool:
        return str_to_bool(v)


class ApplicationConfig(
    ServerConfig,
    ProviderConfig,
    QuotaConfig,
    MonitoringConfig,
    BaseSettings
):
    """Main application configuration that combines all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
