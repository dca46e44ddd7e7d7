"""Minimal logging utilities for Pulido.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from pulido.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Formatting document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "pulido." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'pulido.mymodule'
    """
    if not (name == "pulido" or name.startswith("pulido.")):
        name = f"pulido.{name}"
    return logging.getLogger(name)
