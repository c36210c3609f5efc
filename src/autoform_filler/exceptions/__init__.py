"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout AutoForm Filler,
providing clear error types for different failure scenarios.
"""

from autoform_filler.exceptions.base import (
    AutoFormError,
    ConfigurationError,
    FillInProgressError,
)
from autoform_filler.exceptions.profile import (
    ProfileError,
    ProfileFetchError,
    IncompleteProfileError,
)
from autoform_filler.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    NavigationError,
    StaleElementError,
)

__all__ = [
    # Base exceptions
    "AutoFormError",
    "ConfigurationError",
    "FillInProgressError",
    # Profile exceptions
    "ProfileError",
    "ProfileFetchError",
    "IncompleteProfileError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "NavigationError",
    "StaleElementError",
]
