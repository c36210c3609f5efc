"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and CLI arguments.

Usage:
    from autoform_filler.config import get_settings, load_config

    # Get global settings (loaded once)
    settings = get_settings()

    # Or load fresh settings with overrides
    settings = load_config(fill={"settle_ms": 3000})

Environment Variables:
    AUTOFORM__PROFILE_SERVICE__BASE_URL=https://api.example.com
    AUTOFORM__PROFILE_SERVICE__API_KEY=ak_...
    AUTOFORM__FILL__TIMEOUT_MS=20000
    AUTOFORM__BROWSER__HEADLESS=false
"""

from autoform_filler.config.settings import (
    Settings,
    ProfileServiceSettings,
    FillSettings,
    BrowserSettings,
    LoggingSettings,
)
from autoform_filler.config.loader import ConfigLoader, load_config
from autoform_filler.config.provider import SettingsConfigProvider, StaticConfigProvider

# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "ProfileServiceSettings",
    "FillSettings",
    "BrowserSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
    "SettingsConfigProvider",
    "StaticConfigProvider",
]
