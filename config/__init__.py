"""Configuration management for the image relay.

This module handles all configuration loading and validation using Pydantic BaseSettings.
Configuration is loaded from environment variables and .env files.
"""

from .config import (
    ApplicationConfig,
    ServerConfig,
    ProviderConfig,
    QuotaConfig,
    MonitoringConfig,
    str_to_bool,
    str_to_list,
)


def load_config(**overrides) -> ApplicationConfig:
    """Load and validate application configuration."""
    return ApplicationConfig(**overrides)


__all__ = [
    "ApplicationConfig",
    "ServerConfig",
    "ProviderConfig",
    "QuotaConfig",
    "MonitoringConfig",
    "load_config",
    "str_to_bool",
    "str_to_list",
]
