"""Utility modules for Pulido.

Provides:
- text: string_width, trim_trailing_whitespace for layout measurement
- logger: get_logger for logging
"""

from pulido.utils.logger import get_logger
from pulido.utils.text import string_width, trim_trailing_whitespace

__all__ = [
    "get_logger",
    "string_width",
    "trim_trailing_whitespace",
]
