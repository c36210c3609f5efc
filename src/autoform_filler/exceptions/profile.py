"""
Profile-related exceptions.
"""

from typing import Optional, Sequence

from autoform_filler.exceptions.base import AutoFormError


class ProfileError(AutoFormError):
    """Base exception for profile retrieval and validation errors."""
    pass


class ProfileFetchError(ProfileError):
    """
    The Profile Service did not return a usable profile.

    Raised for:
    - Non-2xx responses (401 missing/invalid key, 404, 5xx)
    - Transport failures (no status code)
    - 2xx responses whose body is not a profile

    The message carries the status and raw body so the caller can show them.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class IncompleteProfileError(ProfileError):
    """
    The profile is missing or lacks required identity fields.

    Filling is refused until every required field is present.
    """

    def __init__(self, missing: Sequence[str], message: Optional[str] = None):
        self.missing = list(missing)
        super().__init__(
            message or f"Profile incomplete. Missing required fields: {', '.join(self.missing)}",
        )
