"""
Browser-related exceptions.
"""

from autoform_filler.exceptions.base import AutoFormError


class BrowserError(AutoFormError):
    """Base exception for browser-related errors."""
    pass


class BrowserLaunchError(BrowserError):
    """
    Error launching the browser.

    Raised when the browser fails to start, which could be due to:
    - Missing browser binaries
    - Invalid browser options
    """
    pass


class BrowserConnectionError(BrowserError):
    """
    Error connecting to the browser.

    Raised when a page is requested before the browser was launched.
    """
    pass


class NavigationError(BrowserError):
    """Error during page navigation."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, {"url": url})
        self.url = url


class StaleElementError(BrowserError):
    """
    A form control could not be read or written.

    Raised when the element was detached between discovery and use, or the
    page threw while the element was being inspected or written.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, {"operation": operation})
        self.operation = operation
