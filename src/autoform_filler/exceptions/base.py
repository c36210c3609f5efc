"""
Base exceptions for AutoForm Filler.
"""


class AutoFormError(Exception):
    """
    Base exception for all AutoForm Filler errors.

    All custom exceptions inherit from this class, making it easy
    to catch any error from the library.

    Attributes:
        message: Human-readable error message
        details: Optional additional error details
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(AutoFormError):
    """
    Error in configuration.

    Raised when the API key or backend URL is missing, before any
    network call is attempted.
    """
    pass


class FillInProgressError(AutoFormError):
    """
    A FILL arrived while another fill session is running on the same page.

    The running session is left alone; the new request is refused.
    """
    pass
