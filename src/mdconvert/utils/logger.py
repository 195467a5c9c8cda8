"""Minimal logging utilities for mdconvert.

Example:
    >>> from mdconvert.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsed %d blocks", 3)
"""

from __future__ import annotations

import logging

_ROOT = "mdconvert"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the "mdconvert." namespace.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("writers").name
        'mdconvert.writers'
    """
    if not (name == _ROOT or name.startswith(f"{_ROOT}.")):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
