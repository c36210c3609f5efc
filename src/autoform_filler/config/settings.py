"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from autoform_filler.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.profile_service.base_url)
    'http://localhost:8080'
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProfileServiceSettings(BaseModel):
    """
    Profile Service connection settings.

    Attributes:
        base_url: Backend base URL (no trailing slash needed)
        api_key: API key sent with every profile request
        profile_path: Path of the profile endpoint
        auth_scheme: How the key is sent ("x-api-key" header or Bearer token)
        timeout: Request timeout in seconds
    """
    base_url: str = "http://localhost:8080"
    api_key: Optional[SecretStr] = None
    profile_path: str = "/api/profile"
    auth_scheme: Literal["x-api-key", "bearer"] = "x-api-key"
    timeout: float = Field(default=15.0, ge=1.0, le=120.0)


class FillSettings(BaseModel):
    """
    Fill orchestration timing.

    Attributes:
        debounce_ms: Quiet period after a mutation burst before a re-pass
        poll_ms: Interval at which stop conditions are evaluated
        settle_ms: Stop once no field was newly filled for this long
        timeout_ms: Hard bound on total fill duration
        max_passes: Hard bound on the number of passes
    """
    debounce_ms: int = Field(default=120, ge=10, le=5000)
    poll_ms: int = Field(default=200, ge=10, le=5000)
    settle_ms: int = Field(default=1500, ge=100, le=60000)
    timeout_ms: int = Field(default=15000, ge=500, le=300000)
    max_passes: int = Field(default=25, ge=1, le=500)


class BrowserSettings(BaseModel):
    """
    Browser automation settings.

    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser to launch
        channel: Optional branded channel (chrome, msedge)
        timeout_ms: Default timeout for navigation
        slow_mo: Slow down operations by this amount (ms) - useful for debugging
    """
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    channel: Optional[str] = None
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    slow_mo: int = Field(default=0, ge=0, le=5000)


class LoggingSettings(BaseModel):
    """
    Logging configuration.

    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for file logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.

    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with AUTOFORM__)
    3. Config file (YAML)
    4. Default values

    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(fill=FillSettings(settle_ms=3000))  # Override
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOFORM__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    profile_service: ProfileServiceSettings = Field(default_factory=ProfileServiceSettings)
    fill: FillSettings = Field(default_factory=FillSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.

        Args:
            overrides: Dictionary of values to override

        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()

        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base

        merged = deep_merge(current, overrides)
        return Settings(**merged)
