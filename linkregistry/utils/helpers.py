"""Helper utilities shared across the registry.

Functions:
    utcnow() -> datetime
        Current time as a timezone-aware UTC datetime
    get_short_url(shortcode, base_url) -> str
        Get string representation of short URL for a given shortcode
"""

from datetime import datetime, UTC


def utcnow() -> datetime:
    """Return the current time in UTC

    Used as the default clock of registry components. Tests control it with
    `freezegun.freeze_time`.
    """
    return datetime.now(UTC)


def get_short_url(shortcode: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): public base URL of the short link service

    Returns:
        str: short url string representation

    Example:
        >>> get_short_url('abc123', 'https://short.ly/')
        'https://short.ly/abc123'
    """
    return f'{base_url.rstrip("/")}/{shortcode}'
