"""
Config providers - IConfigProvider implementations.
"""

from typing import Optional

from autoform_filler.config.settings import Settings
from autoform_filler.interfaces.config import IConfigProvider, ProfileServiceConnection


class SettingsConfigProvider(IConfigProvider):
    """
    Reads the connection from a Settings instance.

    When no settings are given, the global settings are looked up on every
    call, so a reset_settings() between sessions is picked up.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    async def get_connection(self) -> ProfileServiceConnection:
        if self._settings is not None:
            settings = self._settings
        else:
            from autoform_filler.config import get_settings
            settings = get_settings()

        service = settings.profile_service
        api_key = service.api_key.get_secret_value() if service.api_key else None
        return ProfileServiceConnection.create(
            service.base_url,
            api_key,
            profile_path=service.profile_path,
            auth_scheme=service.auth_scheme,
            timeout=service.timeout,
        )


class StaticConfigProvider(IConfigProvider):
    """Fixed connection values, for embedding and tests."""

    def __init__(self, base_url: Optional[str], api_key: Optional[str], **kwargs):
        self._connection = ProfileServiceConnection.create(base_url, api_key, **kwargs)

    async def get_connection(self) -> ProfileServiceConnection:
        return self._connection
