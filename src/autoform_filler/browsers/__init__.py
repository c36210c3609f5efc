"""
Browsers module - Browser automation implementations.
"""

from autoform_filler.browsers.playwright_browser import (
    PlaywrightBrowser,
    PlaywrightFormElement,
    PlaywrightFormPage,
)

__all__ = [
    "PlaywrightBrowser",
    "PlaywrightFormElement",
    "PlaywrightFormPage",
]
