"""
Value Writer - Writes values into controls so UI frameworks notice.

The in-page write goes through the native prototype setter and fires
bubbling input/change events (see IFormElement.apply_value). This module
decides whether a write is needed at all.
"""

import logging

from autoform_filler.interfaces.browser import FieldSnapshot, IFormElement
from autoform_filler.engine.mapper import render_value, resolve_option
from autoform_filler.profile.models import ProfileValue

logger = logging.getLogger(__name__)


class ValueWriter:
    """
    Writes one value into one control.

    Returns True only when the control's value actually changed, which
    makes repeated passes over a stable form a no-op.
    """

    async def write(self, element: IFormElement, snapshot: FieldSnapshot, value: ProfileValue) -> bool:
        """
        Write a value.

        Args:
            element: Live control
            snapshot: Its snapshot from this pass
            value: Profile value to write

        Returns:
            Whether a mutation occurred
        """
        if snapshot.is_toggle:
            return False

        text = render_value(value)
        if not text:
            return False

        if snapshot.is_select:
            return await self._write_select(element, snapshot, text)

        if snapshot.value == text:
            return False

        return await element.apply_value(text, focus=True)

    async def _write_select(self, element: IFormElement, snapshot: FieldSnapshot, text: str) -> bool:
        option = resolve_option(snapshot.options, text)
        if option is None:
            logger.debug(f"No option matches in select {snapshot.attributes.get('name', '')!r}")
            return False

        if snapshot.value == option.value:
            return False

        return await element.apply_value(option.value, focus=False)
