"""
Pytest configuration and fixtures.
"""

import dataclasses
from typing import Callable, Dict, List, Optional

import pytest

from autoform_filler.config import FillSettings, reset_settings
from autoform_filler.exceptions import StaleElementError
from autoform_filler.interfaces.browser import (
    FieldSnapshot,
    IFormElement,
    IFormPage,
    IMutationSubscription,
    MutationCallback,
    SelectOption,
)
from autoform_filler.profile.models import Profile


# =============================================================================
# MOCK CLASSES
# =============================================================================

class MockFormElement(IFormElement):
    """
    In-memory form control that records writes.

    `sanitize` mimics a browser-sanitized type (number, date): it maps the
    written value to what the control ends up holding. `on_snapshot` and
    `on_write` run while the control is being inspected or written.
    """

    def __init__(
        self,
        state: FieldSnapshot,
        fail_on_write: bool = False,
        stale: bool = False,
        sanitize: Optional[Callable[[str], str]] = None,
        on_snapshot: Optional[Callable[[], None]] = None,
        on_write: Optional[Callable[[], None]] = None,
    ):
        self.state = state
        self.fail_on_write = fail_on_write
        self.stale = stale
        self.sanitize = sanitize
        self.on_snapshot = on_snapshot
        self.on_write = on_write
        self.attempts: List[str] = []
        self.writes: List[str] = []
        self.focus_flags: List[bool] = []

    @property
    def value(self) -> str:
        return self.state.value

    async def snapshot(self) -> FieldSnapshot:
        if self.stale:
            raise StaleElementError("detached", operation="snapshot")
        if self.on_snapshot:
            self.on_snapshot()
        return dataclasses.replace(self.state)

    async def apply_value(self, value: str, focus: bool = True) -> bool:
        if self.fail_on_write:
            raise StaleElementError("write blew up", operation="apply_value")
        if self.state.value == value:
            return False

        self.attempts.append(value)
        self.state.value = self.sanitize(value) if self.sanitize else value
        if self.on_write:
            self.on_write()
        if self.state.value != value:
            return False

        self.writes.append(value)
        self.focus_flags.append(focus)
        return True


class MockSubscription(IMutationSubscription):
    """Records disposal."""

    def __init__(self, callback: MutationCallback):
        self.callback = callback
        self.dispose_count = 0

    @property
    def disposed(self) -> bool:
        return self.dispose_count > 0

    async def dispose(self) -> None:
        self.dispose_count += 1


class MockFormPage(IFormPage):
    """In-memory page; render() adds controls and notifies observers."""

    def __init__(self, elements: Optional[List[MockFormElement]] = None, url: str = "https://jobs.example.com/apply"):
        self.elements = list(elements or [])
        self._url = url
        self.subscriptions: List[MockSubscription] = []

    @property
    def url(self) -> str:
        return self._url

    async def query_form_controls(self) -> List[IFormElement]:
        return list(self.elements)

    async def observe_mutations(self, callback: MutationCallback) -> IMutationSubscription:
        subscription = MockSubscription(callback)
        self.subscriptions.append(subscription)
        return subscription

    def render(self, *elements: MockFormElement) -> None:
        self.elements.extend(elements)
        for subscription in self.subscriptions:
            if not subscription.disposed:
                subscription.callback(len(elements))

    @property
    def total_writes(self) -> int:
        return sum(len(element.writes) for element in self.elements)


# =============================================================================
# FIXTURES
# =============================================================================

def _snapshot(
    label: str = "",
    name: Optional[str] = None,
    tag_name: str = "input",
    input_type: Optional[str] = None,
    value: str = "",
    options: Optional[List[SelectOption]] = None,
    **kwargs,
) -> FieldSnapshot:
    attributes: Dict[str, str] = dict(kwargs.pop("attributes", {}))
    if name:
        attributes.setdefault("name", name)
        attributes.setdefault("id", name)
    return FieldSnapshot(
        tag_name=tag_name,
        input_type=input_type or ("text" if tag_name == "input" else tag_name),
        value=value,
        attributes=attributes,
        label_for_text=label if attributes.get("id") else "",
        wrapping_label_text="" if attributes.get("id") else label,
        options=options or [],
        **kwargs,
    )


@pytest.fixture
def make_snapshot():
    """Factory for FieldSnapshot with a <label for> when a name is given."""
    return _snapshot


@pytest.fixture
def make_input():
    """Factory for MockFormElement."""
    def factory(label: str = "", name: Optional[str] = None, fail_on_write: bool = False,
                stale: bool = False, sanitize: Optional[Callable[[str], str]] = None,
                on_snapshot: Optional[Callable[[], None]] = None,
                on_write: Optional[Callable[[], None]] = None, **kwargs) -> MockFormElement:
        return MockFormElement(
            _snapshot(label, name, **kwargs),
            fail_on_write=fail_on_write,
            stale=stale,
            sanitize=sanitize,
            on_snapshot=on_snapshot,
            on_write=on_write,
        )
    return factory


@pytest.fixture
def make_page():
    """Factory for MockFormPage."""
    return MockFormPage


@pytest.fixture
def fast_settings():
    """Fill timing small enough for unit tests."""
    return FillSettings(debounce_ms=20, poll_ms=20, settle_ms=200, timeout_ms=5000, max_passes=25)


@pytest.fixture
def profile():
    """A complete profile."""
    return Profile.model_validate({
        "first_name": "Asha",
        "last_name": "Rao",
        "email": "asha.rao@example.com",
        "phone": "+91 98450 12345",
        "city": "Bengaluru",
        "country": "India",
        "current_company": "Acme Corp",
        "role_title": "Backend Engineer",
        "total_experience_years": 6.0,
        "notice_period_days": 30,
        "current_ctc": "24 LPA",
        "expected_ctc": "32 LPA",
        "relocation": True,
        "preferred_locations": ["Bengaluru", "Pune"],
        "linkedin_url": "https://linkedin.com/in/asharao",
    })


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Keep the global settings singleton and AUTOFORM__ env out of tests."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("AUTOFORM__") or key.upper() == "AUTOFORM_CONFIG":
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
