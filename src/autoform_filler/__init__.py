"""
AutoForm Filler - Fill web forms from a saved profile.

This package fetches a user's profile from the Profile Service with an API
key and fills the form controls of a live page: it finds fillable fields,
infers what each one asks for from its label and attributes, writes values
so framework-managed inputs accept them, and keeps re-filling while the
page renders more of the form.

Example:
    >>> from autoform_filler import ContentScript, StaticConfigProvider
    >>> script = ContentScript(page, StaticConfigProvider("https://api.example.com", "ak_123"))
    >>> reply = await script.handle_message({"type": "FILL"})
"""

__version__ = "0.1.0"

# Public API exports
from autoform_filler.config.settings import Settings
from autoform_filler.config.provider import SettingsConfigProvider, StaticConfigProvider
from autoform_filler.content_script import ContentScript, MessageType
from autoform_filler.engine.orchestrator import FillOrchestrator, FillReport, FillState
from autoform_filler.profile.models import Profile

__all__ = [
    "ContentScript",
    "MessageType",
    "FillOrchestrator",
    "FillReport",
    "FillState",
    "Profile",
    "Settings",
    "SettingsConfigProvider",
    "StaticConfigProvider",
    "__version__",
]
