import string
from enum import StrEnum


class Defaults:
    """Default registry parameters."""

    SHORTCODE_LENGTH = 6  # Length of randomly generated shortcodes
    ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
    BASE_URL = 'https://short.ly'
    MAX_ALLOCATION_ATTEMPTS = 100  # Generator collisions tolerated before giving up
    SWEEP_INTERVAL_SECONDS = 60.0
    REFERRER = 'Direct'  # Recorded when a click carries no referrer


class Validity:
    """Short URL validity periods in minutes."""

    DEFAULT = 30
    MIN = 1
    MAX = 525_600  # 60 * 24 * 365


class CustomShortcode:
    """Length bounds for user supplied shortcodes."""

    MIN_LENGTH = 3
    MAX_LENGTH = 20


class Limits:
    """Default sizes of analytics views."""

    TOP_PERFORMERS = 5
    RECENT_ACTIVITY = 3
    RECENT_URLS = 3


class ENV(StrEnum):
    """Environment variable names."""

    APP_ENV = 'APP_ENV'
    LOG_LEVEL = 'LOG_LEVEL'
    CONFIG_PATH = 'LINKREGISTRY_CONFIG'
    BASE_URL = 'LINKREGISTRY_BASE_URL'
    DEFAULT_VALIDITY_MINUTES = 'LINKREGISTRY_DEFAULT_VALIDITY_MINUTES'
    SWEEP_INTERVAL_SECONDS = 'LINKREGISTRY_SWEEP_INTERVAL_SECONDS'


# Log event names
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_REJECTED = 'SHORT_URL_REJECTED'
SHORT_URL_CLICKED = 'SHORT_URL_CLICKED'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
SHORT_URL_DELETED = 'SHORT_URL_DELETED'
EXPIRED_URLS_DETECTED = 'EXPIRED_URLS_DETECTED'
