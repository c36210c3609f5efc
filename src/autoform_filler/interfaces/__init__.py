"""
Interfaces module - Abstract base classes for all pluggable components.

This module defines the contracts that browser engines and configuration
sources must implement to be used by the fill engine.
"""

from autoform_filler.interfaces.browser import (
    IFormPage,
    IFormElement,
    IMutationSubscription,
    MutationCallback,
    FieldSnapshot,
    SelectOption,
    SiblingText,
    BrowserType,
    HINT_ATTRIBUTES,
)
from autoform_filler.interfaces.config import (
    IConfigProvider,
    ProfileServiceConnection,
)

__all__ = [
    # Browser interfaces
    "IFormPage",
    "IFormElement",
    "IMutationSubscription",
    "MutationCallback",
    "FieldSnapshot",
    "SelectOption",
    "SiblingText",
    "BrowserType",
    "HINT_ATTRIBUTES",
    # Config interfaces
    "IConfigProvider",
    "ProfileServiceConnection",
]
