"""
Browser Interface - Abstract base classes for the pages the engine fills.

This module defines the contract a browser implementation (Playwright today)
must follow so the fill engine can inspect and write form controls.

Everything the engine decides is decided on a FieldSnapshot: a plain,
serializable description of one control and the label text around it,
read from the live page in a single round trip.

Example:
    >>> from autoform_filler.browsers import PlaywrightBrowser
    >>> browser = PlaywrightBrowser()
    >>> await browser.launch(headless=True)
    >>> page = await browser.new_page()
    >>> await page.goto("https://example.com/apply")
    >>> controls = await page.query_form_controls()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List


class BrowserType(Enum):
    """Supported browser types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


# Attributes read as semantic hints, in signature order
HINT_ATTRIBUTES = (
    "name",
    "id",
    "placeholder",
    "aria-label",
    "autocomplete",
    "data-testid",
    "data-test-id",
    "data-test",
    "data-qa",
    "data-automation-id",
)

# Called with the number of DOM mutation records in one observer batch
MutationCallback = Callable[[int], None]


@dataclass
class SelectOption:
    """One <option> of a <select>, in document order."""
    value: str
    text: str


@dataclass
class SiblingText:
    """A preceding sibling element of a control: its tag and visible text."""
    tag_name: str
    text: str = ""


@dataclass
class FieldSnapshot:
    """
    Represents a form control with everything needed to label and fill it.

    Attributes:
        tag_name: input, textarea or select
        input_type: lowercased type for inputs, else the tag name
        value: current value
        disabled: disabled property
        display: computed CSS display
        visibility: computed CSS visibility
        rendered: False when the browser reports the element not rendered
        attributes: non-empty HINT_ATTRIBUTES values
        label_for_text: text of <label for=id>
        wrapping_label_text: text of the ancestor <label>, nested controls removed
        preceding_siblings: up to 3 preceding sibling elements, nearest first
        labelledby_text: text of the aria-labelledby targets
        options: <option> list for selects
    """
    tag_name: str
    input_type: str = "text"
    value: str = ""
    disabled: bool = False
    display: str = "inline-block"
    visibility: str = "visible"
    rendered: bool = True
    attributes: Dict[str, str] = field(default_factory=dict)
    label_for_text: str = ""
    wrapping_label_text: str = ""
    preceding_siblings: List[SiblingText] = field(default_factory=list)
    labelledby_text: str = ""
    options: List[SelectOption] = field(default_factory=list)

    @property
    def is_select(self) -> bool:
        return self.tag_name == "select"

    @property
    def is_toggle(self) -> bool:
        """Checkbox or radio input."""
        return self.tag_name == "input" and self.input_type in ("checkbox", "radio")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldSnapshot":
        """Build a snapshot from the in-page JSON description."""
        return cls(
            tag_name=data.get("tag_name", ""),
            input_type=data.get("input_type") or "text",
            value=data.get("value") or "",
            disabled=bool(data.get("disabled")),
            display=data.get("display") or "",
            visibility=data.get("visibility") or "",
            rendered=data.get("rendered", True) is not False,
            attributes=dict(data.get("attributes") or {}),
            label_for_text=data.get("label_for_text") or "",
            wrapping_label_text=data.get("wrapping_label_text") or "",
            preceding_siblings=[
                SiblingText(tag_name=s.get("tag_name", ""), text=s.get("text") or "")
                for s in data.get("preceding_siblings") or []
            ],
            labelledby_text=data.get("labelledby_text") or "",
            options=[
                SelectOption(value=o.get("value") or "", text=o.get("text") or "")
                for o in data.get("options") or []
            ],
        )


class IFormElement(ABC):
    """
    Abstract interface for one live form control.

    Implementations raise StaleElementError when the control cannot be
    read or written anymore.
    """

    @abstractmethod
    async def snapshot(self) -> FieldSnapshot:
        """
        Describe this control and its surrounding label text.

        Returns:
            A FieldSnapshot of the control's current state
        """
        ...

    @abstractmethod
    async def apply_value(self, value: str, focus: bool = True) -> bool:
        """
        Write a value the way a user edit would be observed.

        Sets the value through the native prototype setter (bypassing
        instance-level overrides installed by UI frameworks), then
        dispatches bubbling "input" and "change" events.

        Args:
            value: The value to write
            focus: Focus before and blur after writing

        Returns:
            True if the control now holds the value, False if it already
            did or the page rejected it (sanitized or reset by a framework)
        """
        ...


class IMutationSubscription(ABC):
    """A live DOM mutation observation that must be disposed."""

    @abstractmethod
    async def dispose(self) -> None:
        """Stop observing. Safe to call more than once."""
        ...


class IFormPage(ABC):
    """
    Abstract interface for a page whose forms are filled.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Get the current page URL."""
        ...

    @abstractmethod
    async def query_form_controls(self) -> List[IFormElement]:
        """
        Find every input, textarea and select in document order.

        Returns:
            Fresh element references; nothing is cached between calls
        """
        ...

    @abstractmethod
    async def observe_mutations(self, callback: MutationCallback) -> IMutationSubscription:
        """
        Observe subtree mutations of the whole document.

        Args:
            callback: Invoked on the event loop once per mutation batch

        Returns:
            Subscription to dispose when done
        """
        ...
