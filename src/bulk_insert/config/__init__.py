"""Configuration management for bulk_insert.

Usage:
    >>> from bulk_insert.config import get_settings
    >>> settings = get_settings()
    >>> settings.BULK_INSERT_SET_SIZE
    500
"""

from bulk_insert.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
