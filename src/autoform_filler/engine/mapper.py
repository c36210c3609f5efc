"""
Field Mapper - Maps a signature to a profile value.

Matching is plain substring containment against the normalized signature,
evaluated over FIELD_RULES top to bottom; the first rule that matches
decides the field, even when the profile has nothing for it. Vocabularies
overlap ("name" is in "first name", "company name" and "username"), so the
table order is the tie-break policy:

- first/last name before the generic name rule
- the generic name rule excludes "user" and "company"
- email and phone before address/location, so "email address" and
  "contact number" land on the specific field
- relocation before the location rules, since "relocation" contains
  "location"
- company before the role/title rule, so "Current Company Name" maps to
  current_company and never to the "current" compensation rule
- "state" near the bottom, since it also appears in "statement" or "status"
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from autoform_filler.interfaces.browser import SelectOption
from autoform_filler.engine.labeler import normalize_text
from autoform_filler.profile.models import Profile, ProfileValue, is_blank

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")

COMPENSATION = ("ctc", "salary", "compensation")


@dataclass(frozen=True)
class FieldRule:
    """
    One row of the mapping table.

    A rule matches when any of its phrases is in the signature, or when
    every group in `require` has at least one hit and nothing in `exclude`
    is present.

    Attributes:
        field: Profile field the rule fills
        require: Groups of alternatives, all groups must hit
        exclude: Substrings that veto the `require` match
        phrases: Substrings that match on their own
        value: Custom value builder (defaults to the profile field)
    """
    field: str
    require: Tuple[Tuple[str, ...], ...] = ()
    exclude: Tuple[str, ...] = ()
    phrases: Tuple[str, ...] = ()
    value: Optional[Callable[[Profile], Optional[ProfileValue]]] = None

    def matches(self, signature: str) -> bool:
        if any(phrase in signature for phrase in self.phrases):
            return True
        if not self.require:
            return False
        if any(word in signature for word in self.exclude):
            return False
        return all(any(word in signature for word in group) for group in self.require)

    def resolve(self, profile: Profile) -> Optional[ProfileValue]:
        if self.value is not None:
            return self.value(profile)
        return profile.value_of(self.field)


def all_of(*words: str) -> Tuple[Tuple[str, ...], ...]:
    """Every word must appear."""
    return tuple((word,) for word in words)


def any_of(*words: str) -> Tuple[Tuple[str, ...], ...]:
    """At least one word must appear."""
    return (tuple(words),)


def full_name(profile: Profile) -> Optional[ProfileValue]:
    parts = [str(profile.value_of(name)).strip() for name in ("first_name", "last_name")
             if profile.has_value(name)]
    if parts:
        return " ".join(parts)
    return profile.full_name


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("first_name", require=all_of("first", "name")),
    FieldRule("last_name", require=all_of("last", "name"), phrases=("surname",)),
    FieldRule("full_name", phrases=("full name",), require=all_of("name"),
              exclude=("user", "company"), value=full_name),
    FieldRule("email", require=all_of("email")),
    FieldRule("phone", require=any_of("phone", "mobile", "contact")),
    FieldRule("relocation", require=all_of("relocat")),
    FieldRule("preferred_locations", require=any_of("preferred", "desired") + any_of("location")),
    FieldRule("address", require=all_of("address")),
    FieldRule("city", require=any_of("city", "location")),
    FieldRule("country", require=all_of("country")),
    FieldRule("current_company", require=any_of("company", "organization")),
    FieldRule("work_authorization", require=any_of("authoriz", "sponsorship", "visa")),
    FieldRule("role_title", require=any_of("role", "title", "designation", "position")),
    FieldRule("total_experience_years", require=all_of("experience") + any_of("year", "yrs", "years")),
    FieldRule("notice_period_days", require=all_of("notice")),
    FieldRule("current_ctc", require=all_of("current") + any_of(*COMPENSATION)),
    FieldRule("expected_ctc", require=any_of("expected", "desired") + any_of(*COMPENSATION)),
    FieldRule("linkedin_url", require=all_of("linkedin")),
    FieldRule("github_url", require=all_of("github")),
    FieldRule("portfolio_url", require=any_of("portfolio", "website")),
    FieldRule("education", require=any_of("education", "degree", "qualification")),
    FieldRule("state", require=all_of("state")),
    FieldRule("summary", require=any_of("summary", "about")),
)


class FieldMapper:
    """
    Evaluates the rule table against signatures.

    Example:
        >>> mapper = FieldMapper()
        >>> mapper.match_rule("current company name").field
        'current_company'
    """

    def __init__(self, rules: Iterable[FieldRule] = FIELD_RULES):
        self.rules: Tuple[FieldRule, ...] = tuple(rules)

    def match_rule(self, signature: str) -> Optional[FieldRule]:
        """First rule matching the signature, or None."""
        for rule in self.rules:
            if rule.matches(signature):
                return rule
        return None

    def map_value(self, signature: str, profile: Profile) -> Optional[ProfileValue]:
        """
        Value to write for a signature.

        Returns:
            The profile value, or None when no rule matches or the
            matched field is blank
        """
        rule = self.match_rule(signature)
        if rule is None:
            return None
        return self.value_for(rule, profile)

    def value_for(self, rule: FieldRule, profile: Profile) -> Optional[ProfileValue]:
        """The rule's profile value, None when blank."""
        value = rule.resolve(profile)
        if is_blank(value):
            logger.debug(f"Matched {rule.field} but profile has no value for it")
            return None
        return value


def render_value(value: ProfileValue) -> str:
    """
    Text form of a profile value.

    Booleans become Yes/No, integral floats lose their ".0",
    lists are comma-joined.
    """
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value).strip()


def resolve_option(options: List[SelectOption], wanted: str) -> Optional[SelectOption]:
    """
    Pick the <option> for a wanted value.

    Rules, first rule with any candidate wins, first candidate in document
    order is chosen:
    1. option value equals wanted
    2. option text equals wanted
    3. option text contains wanted
    4. option text contains the first digit run of wanted

    Comparison is case-insensitive with whitespace collapsed.

    Example:
        >>> opts = [SelectOption("a", "0-30 days"), SelectOption("b", "30-60 days")]
        >>> resolve_option(opts, "30").text
        '0-30 days'
    """
    target = normalize_text(wanted)
    if not target:
        return None

    rules: List[Callable[[SelectOption], bool]] = [
        lambda o: normalize_text(o.value) == target,
        lambda o: normalize_text(o.text) == target,
        lambda o: target in normalize_text(o.text),
    ]

    digits = _DIGITS.search(target)
    if digits:
        number = digits.group(0)
        rules.append(lambda o: number in normalize_text(o.text))

    for rule in rules:
        for option in options:
            if rule(option):
                return option
    return None
