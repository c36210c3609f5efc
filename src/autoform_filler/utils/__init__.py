"""
Utilities module - Common utility functions.
"""

from autoform_filler.utils.logging import setup_logging

__all__ = [
    "setup_logging",
]
