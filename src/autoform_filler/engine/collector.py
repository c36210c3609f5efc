"""
Field Collector - Finds the form controls a pass may fill.

The DOM is the source of truth: every call re-queries the page, so a
collector never hands out controls from before a re-render.
"""

import logging
from typing import AsyncIterator, Tuple

from autoform_filler.exceptions import StaleElementError
from autoform_filler.interfaces.browser import FieldSnapshot, IFormElement, IFormPage

logger = logging.getLogger(__name__)

FILLABLE_TAGS = ("input", "textarea", "select")

# Input types that never hold profile data
EXCLUDED_INPUT_TYPES = frozenset({"hidden", "file", "submit", "button", "reset", "image"})


def is_fillable(snapshot: FieldSnapshot) -> bool:
    """
    Fillability predicate.

    Not disabled, not a hidden/file/button-like input, and not hidden by
    computed CSS display or visibility.
    """
    if snapshot.tag_name not in FILLABLE_TAGS:
        return False
    if snapshot.disabled:
        return False
    if snapshot.tag_name == "input" and snapshot.input_type in EXCLUDED_INPUT_TYPES:
        return False
    if snapshot.display == "none":
        return False
    if snapshot.visibility in ("hidden", "collapse"):
        return False
    return snapshot.rendered


class FieldCollector:
    """
    Enumerates fillable controls in document order.

    Example:
        >>> collector = FieldCollector()
        >>> async for element, snapshot in collector.iter_fillable(page):
        ...     print(snapshot.attributes.get("name"))
    """

    async def iter_fillable(self, page: IFormPage) -> AsyncIterator[Tuple[IFormElement, FieldSnapshot]]:
        """
        Yield (element, snapshot) for each fillable control.

        Controls that vanish while being inspected are skipped.
        """
        for element in await page.query_form_controls():
            try:
                snapshot = await element.snapshot()
            except StaleElementError as e:
                logger.debug(f"Skipping control that could not be inspected: {e}")
                continue

            if is_fillable(snapshot):
                yield element, snapshot

    async def count_fillable(self, page: IFormPage) -> int:
        """Number of fillable controls currently on the page."""
        count = 0
        async for _ in self.iter_fillable(page):
            count += 1
        return count
