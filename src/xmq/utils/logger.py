"""Minimal logging utilities for xmq.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; applications configure logging.

Example:
    >>> from xmq.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Reading %s", "config.xmq")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "xmq." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("files").name
        'xmq.files'
        >>> get_logger("xmq").name
        'xmq'
    """
    if not (name == "xmq" or name.startswith("xmq.")):
        name = f"xmq.{name}"
    return logging.getLogger(name)
