"""
Profile module - The profile record and the service it is fetched from.
"""

from autoform_filler.profile.models import (
    Profile,
    ProfileValue,
    REQUIRED_FIELDS,
    ensure_complete,
    is_blank,
    parse_profile,
)
from autoform_filler.profile.client import ProfileClient

__all__ = [
    "Profile",
    "ProfileValue",
    "REQUIRED_FIELDS",
    "ensure_complete",
    "is_blank",
    "parse_profile",
    "ProfileClient",
]
