"""
Profile Service client.

Fetches the profile for an API key:

    GET <base_url>/api/profile
    x-api-key: <key>

Any non-2xx response is a hard failure for the fill session; there is no
retry at this layer.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from autoform_filler.exceptions import ConfigurationError, ProfileFetchError
from autoform_filler.interfaces.config import ProfileServiceConnection
from autoform_filler.profile.models import Profile, parse_profile

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class ProfileClient:
    """
    Async client for the Profile Service.

    Example:
        >>> async with ProfileClient("https://api.example.com", "ak_123") as client:
        ...     profile = await client.fetch_profile()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        profile_path: str = "/api/profile",
        auth_scheme: str = "x-api-key",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL
            api_key: API key for the profile owner
            profile_path: Path of the profile endpoint
            auth_scheme: "x-api-key" header or "bearer" Authorization header
            timeout: Request timeout in seconds
            transport: Optional custom transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: base_url or api_key is missing
        """
        base_url = (base_url or "").strip().rstrip("/")
        api_key = (api_key or "").strip()

        if not base_url:
            raise ConfigurationError("Backend URL not set. Configure the Profile Service base URL.")
        if not api_key:
            raise ConfigurationError("API key not set. Save your API key in the settings first.")

        self._base_url = base_url
        self._profile_path = "/" + profile_path.lstrip("/")

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._auth_headers(api_key, auth_scheme),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_connection(
        cls,
        connection: ProfileServiceConnection,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ProfileClient":
        """Create a client from provider-supplied connection settings."""
        return cls(
            base_url=connection.base_url,
            api_key=connection.api_key,
            profile_path=connection.profile_path,
            auth_scheme=connection.auth_scheme,
            timeout=connection.timeout,
            transport=transport,
        )

    @staticmethod
    def _auth_headers(api_key: str, auth_scheme: str) -> Dict[str, str]:
        if auth_scheme == "bearer":
            return {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}
        return {API_KEY_HEADER: api_key, "Accept": "application/json"}

    @property
    def profile_url(self) -> str:
        return f"{self._base_url}{self._profile_path}"

    async def fetch_profile(self) -> Optional[Profile]:
        """
        Fetch the profile.

        Returns:
            The profile, or None when the service has none yet

        Raises:
            ProfileFetchError: Transport failure, non-2xx status, or a body
                that is not a profile
        """
        logger.debug(f"Fetching profile from {self.profile_url}")

        try:
            response = await self._client.get(self._profile_path)
        except httpx.HTTPError as e:
            raise ProfileFetchError(f"Backend request failed: {e}") from e

        body = response.text
        if not response.is_success:
            logger.warning(f"Profile fetch failed with status {response.status_code}")
            raise ProfileFetchError(
                f"Backend {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        if not body.strip():
            return None

        try:
            data: Any = response.json()
        except ValueError as e:
            raise ProfileFetchError(
                f"Backend {response.status_code}: response is not JSON: {body[:200]}",
                status_code=response.status_code,
                body=body,
            ) from e

        try:
            profile = parse_profile(data)
        except (ValueError, ValidationError) as e:
            raise ProfileFetchError(
                f"Backend {response.status_code}: invalid profile payload: {e}",
                status_code=response.status_code,
                body=body,
            ) from e

        logger.info("Using backend profile" if profile else "Backend returned no profile")
        return profile

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "ProfileClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
