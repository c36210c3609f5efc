"""
Profile model and the required-field gate.

The Profile Service has served two shapes over time: a snake_case record
(first_name, current_ctc, ...) and an older camelCase one (fullName,
yearsExp, website, ...). Both are accepted; the engine only ever reads
the snake_case attribute names.
"""

from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from autoform_filler.exceptions import IncompleteProfileError

ProfileValue = Union[bool, int, float, str, List[str]]

REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone")


def _field(*aliases: str) -> Any:
    return Field(default=None, validation_alias=AliasChoices(*aliases))


class Profile(BaseModel):
    """
    Read-only profile record fetched for one fill session.

    Unknown keys (database ids, timestamps) are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Identity
    first_name: Optional[ProfileValue] = _field("first_name", "firstName")
    last_name: Optional[ProfileValue] = _field("last_name", "lastName")
    full_name: Optional[ProfileValue] = _field("full_name", "fullName")
    email: Optional[ProfileValue] = _field("email")
    phone: Optional[ProfileValue] = _field("phone")

    # Location
    address: Optional[ProfileValue] = _field("address")
    city: Optional[ProfileValue] = _field("city")
    state: Optional[ProfileValue] = _field("state")
    country: Optional[ProfileValue] = _field("country")
    preferred_locations: Optional[ProfileValue] = _field("preferred_locations", "preferredLocations")
    relocation: Optional[ProfileValue] = _field("relocation")

    # Employment
    current_company: Optional[ProfileValue] = _field("current_company", "currentCompany")
    role_title: Optional[ProfileValue] = _field("role_title", "roleTitle")
    total_experience_years: Optional[ProfileValue] = _field(
        "total_experience_years", "totalExperienceYears", "yearsExp"
    )
    notice_period_days: Optional[ProfileValue] = _field(
        "notice_period_days", "noticePeriodDays", "noticePeriod"
    )
    work_authorization: Optional[ProfileValue] = _field("work_authorization", "workAuthorization")
    education: Optional[ProfileValue] = _field("education")
    summary: Optional[ProfileValue] = _field("summary")

    # Compensation
    current_ctc: Optional[ProfileValue] = _field("current_ctc", "currentCtc")
    expected_ctc: Optional[ProfileValue] = _field("expected_ctc", "expectedCtc")

    # Links
    linkedin_url: Optional[ProfileValue] = _field("linkedin_url", "linkedinUrl", "linkedin")
    github_url: Optional[ProfileValue] = _field("github_url", "githubUrl", "github")
    portfolio_url: Optional[ProfileValue] = _field("portfolio_url", "portfolioUrl", "website")

    def value_of(self, name: str) -> Optional[ProfileValue]:
        """Get a field by name, None when unknown or unset."""
        return getattr(self, name, None) if name in type(self).model_fields else None

    def has_value(self, name: str) -> bool:
        """True when the field holds something other than blank text."""
        return not is_blank(self.value_of(name))

    def missing_required(self) -> List[str]:
        """Required identity fields that are empty, in REQUIRED_FIELDS order."""
        return [name for name in REQUIRED_FIELDS if not self.has_value(name)]


def is_blank(value: Optional[ProfileValue]) -> bool:
    """None, whitespace-only text, or an empty list."""
    if value is None:
        return True
    if isinstance(value, list):
        return not any(str(item).strip() for item in value)
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_profile(data: Any) -> Optional[Profile]:
    """
    Build a Profile from a Profile Service payload.

    Accepts {"profile": {...}}, {"profile": null} and a bare record.

    Returns:
        The profile, or None when the service has none yet
    """
    if isinstance(data, dict) and "profile" in data:
        data = data["profile"]
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"Expected a profile object, got {type(data).__name__}")
    return Profile.model_validate(data)


def ensure_complete(profile: Optional[Profile]) -> Profile:
    """
    Required-field gate, checked before any pass runs.

    Raises:
        IncompleteProfileError: No profile, or a required field is blank
    """
    if profile is None:
        raise IncompleteProfileError(
            list(REQUIRED_FIELDS),
            message=(
                "No profile found for this API key. Save your profile first "
                f"(required: {', '.join(REQUIRED_FIELDS)})"
            ),
        )
    missing = profile.missing_required()
    if missing:
        raise IncompleteProfileError(missing)
    return profile
