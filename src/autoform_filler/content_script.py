"""
Content Script - Message bridge between the UI layer and the fill engine.

The UI sends a message and awaits the reply:

    {"type": "PING"}    -> {"ok": True, "message": "pong"}
    {"type": "DETECT"}  -> {"ok": True, "message": "Detected 7 fields", "count": 7}
    {"type": "FILL"}    -> {"ok": True, "message": "Filled 5 of 7 fields in 2 passes (settled)", ...}

Every path replies, including failures; nothing here raises to the caller.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from autoform_filler.config.settings import FillSettings
from autoform_filler.engine.collector import FieldCollector
from autoform_filler.engine.orchestrator import FillOrchestrator, FillReport, FillState
from autoform_filler.exceptions import AutoFormError, FillInProgressError
from autoform_filler.interfaces.browser import IFormPage
from autoform_filler.interfaces.config import IConfigProvider, ProfileServiceConnection
from autoform_filler.profile.client import ProfileClient
from autoform_filler.profile.models import Profile, ensure_complete

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ProfileServiceConnection], ProfileClient]


class MessageType(str, Enum):
    """Actions the UI layer can request."""
    PING = "PING"
    DETECT = "DETECT"
    FILL = "FILL"


class ContentScript:
    """
    Handles UI messages for one page.

    Example:
        >>> script = ContentScript(page, SettingsConfigProvider())
        >>> reply = await script.handle_message({"type": "FILL"})
        >>> print(reply["message"])
    """

    def __init__(
        self,
        page: IFormPage,
        config_provider: IConfigProvider,
        fill_settings: Optional[FillSettings] = None,
        client_factory: ClientFactory = ProfileClient.from_connection,
    ):
        """
        Initialize the content script.

        Args:
            page: Page to fill
            config_provider: Source of the API key and backend URL
            fill_settings: Orchestration timing
            client_factory: Builds the Profile Service client for a session
        """
        self.page = page
        self.config_provider = config_provider
        self.fill_settings = fill_settings or FillSettings()
        self.client_factory = client_factory
        self.collector = FieldCollector()
        self.orchestrator = FillOrchestrator(page, self.fill_settings, collector=self.collector)

    async def handle_message(self, message: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Dispatch one message and build its reply.

        The action is read from "type" (or "action"). Anything that is not
        a mapping is an unknown action.
        """
        if not isinstance(message, Mapping):
            return {"ok": False, "message": "Unknown action"}

        action = str(message.get("type") or message.get("action") or "").upper()

        try:
            if action == MessageType.PING:
                return {"ok": True, "message": "pong"}

            if action == MessageType.DETECT:
                count = await self.detect()
                logger.info(f"DETECT -> {count} fields")
                return {"ok": True, "message": f"Detected {count} fields", "count": count}

            if action == MessageType.FILL:
                report = await self.fill()
                return {"ok": True, "message": report.summary(), "report": report.to_dict()}

        except AutoFormError as e:
            logger.warning(f"{action} refused: {e.message}")
            return {"ok": False, "message": e.message, "error": type(e).__name__}
        except Exception as e:
            logger.exception(f"{action} failed")
            return {"ok": False, "message": f"Error: {e}", "error": type(e).__name__}

        return {"ok": False, "message": "Unknown action"}

    async def detect(self) -> int:
        """Count fillable fields without writing anything."""
        return await self.collector.count_fillable(self.page)

    async def load_profile(self) -> Profile:
        """
        Read settings, fetch the profile, apply the required-field gate.

        Raises:
            ConfigurationError: API key or backend URL missing
            ProfileFetchError: The Profile Service did not return a profile
            IncompleteProfileError: Required identity fields are missing
        """
        connection = await self.config_provider.get_connection()

        client = self.client_factory(connection)
        try:
            profile = await client.fetch_profile()
        finally:
            await client.close()

        return ensure_complete(profile)

    async def fill(self) -> FillReport:
        """
        Run a full fill session on the page.

        Raises:
            FillInProgressError: Another FILL is still running on this page
        """
        if self.orchestrator.state == FillState.RUNNING:
            raise FillInProgressError("A fill is already running on this page")

        profile = await self.load_profile()
        return await self.orchestrator.run(profile)
