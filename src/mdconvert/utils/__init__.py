"""Utility modules for mdconvert.

Provides:
- text: slugify, stringify for heading identifiers
- logger: get_logger for logging
"""

from mdconvert.utils.logger import get_logger
from mdconvert.utils.text import slugify, stringify

__all__ = [
    "get_logger",
    "slugify",
    "stringify",
]
