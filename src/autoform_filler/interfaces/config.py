"""
Config Provider Interface - Where a fill session reads its connection settings.

The API key and backend URL belong to whoever hosts the engine (an extension
storage area, a settings file, CLI flags). The engine only asks for them once,
at the start of a session, through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProfileServiceConnection:
    """
    Connection details for the Profile Service.

    Attributes:
        base_url: Backend base URL, trimmed and without trailing slash
        api_key: API key, trimmed (may be empty when not configured)
        profile_path: Path of the profile endpoint
        auth_scheme: "x-api-key" or "bearer"
        timeout: Request timeout in seconds
    """
    base_url: str
    api_key: str
    profile_path: str = "/api/profile"
    auth_scheme: str = "x-api-key"
    timeout: float = 15.0

    @classmethod
    def create(cls, base_url: str | None, api_key: str | None, **kwargs) -> "ProfileServiceConnection":
        """Build a connection, normalizing user-entered values."""
        return cls(
            base_url=(base_url or "").strip().rstrip("/"),
            api_key=(api_key or "").strip(),
            **kwargs,
        )


class IConfigProvider(ABC):
    """Abstract source of Profile Service connection settings."""

    @abstractmethod
    async def get_connection(self) -> ProfileServiceConnection:
        """
        Read the current connection settings.

        Returns:
            The connection to use for this session
        """
        ...
