"""Input validation for short URL creation requests.

Functions:
    validate_url(url) -> str
        Strip and validate an original URL, raise InvalidUrlError if malformed.
    validate_shortcode(shortcode, min_length, max_length) -> str
        Strip and validate a custom shortcode, raise InvalidShortcodeFormatError.
    validate_validity_minutes(minutes, minimum, maximum) -> int
        Validate a validity period, raise InvalidValidityPeriodError.
"""

import re
import urllib.parse

from linkregistry.constants import CustomShortcode, Validity
from linkregistry.exceptions import InvalidUrlError, InvalidShortcodeFormatError, InvalidValidityPeriodError


SHORTCODE_PATTERN = re.compile(r'[A-Za-z0-9]+')
SCHEME_PATTERN = re.compile(r'[A-Za-z][A-Za-z0-9+.-]*')
# Schemes whose URLs carry an authority component and so need a host
AUTHORITY_SCHEMES = frozenset({'http', 'https', 'ftp', 'ws', 'wss'})


def validate_url(url: str) -> str:
    """Validate an original URL and return it stripped of surrounding whitespace

    A URL is accepted when it is absolute: it has a scheme followed by a
    non-empty remainder. Web schemes (http, https, ftp, ws, wss) must also
    name a host. Whitespace is allowed in the path, query and fragment, but
    not in the scheme or the authority. Content is not checked.

    Raises:
        InvalidUrlError: If the URL is empty or malformed.

    Example:
        >>> validate_url('  https://example.com/page ')
        'https://example.com/page'
        >>> validate_url('mailto:user@example.com')
        'mailto:user@example.com'
        >>> validate_url('example.com')
        InvalidUrlError: Invalid URL 'example.com': missing scheme.
    """
    if not isinstance(url, str):
        raise InvalidUrlError(f'URL must be of type string (given type: {type(url)}).')

    url = url.strip()
    if not url:
        raise InvalidUrlError('URL must be a non-empty string.')

    try:
        components = urllib.parse.urlsplit(url)
        hostname, _ = components.hostname, components.port  # .port raises ValueError if malformed
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL '{url}': {e}.") from e

    scheme = components.scheme
    if not scheme or not SCHEME_PATTERN.fullmatch(scheme):
        raise InvalidUrlError(f"Invalid URL '{url}': missing scheme.")
    if not url[len(scheme) + 1:].strip():
        raise InvalidUrlError(f"Invalid URL '{url}': nothing follows the scheme.")
    if any(character.isspace() for character in components.netloc):
        raise InvalidUrlError(f"Invalid URL '{url}': whitespace in authority.")
    if scheme.lower() in AUTHORITY_SCHEMES and not hostname:
        raise InvalidUrlError(f"Invalid URL '{url}': missing host.")
    return url


def validate_shortcode(
    shortcode: str,
    min_length: int = CustomShortcode.MIN_LENGTH,
    max_length: int = CustomShortcode.MAX_LENGTH,
) -> str:
    """Validate a custom shortcode and return it stripped of surrounding whitespace

    Raises:
        InvalidShortcodeFormatError:
            If the shortcode length is outside [min_length, max_length] or it
            contains anything but ASCII letters and digits.

    Example:
        >>> validate_shortcode('abc')
        'abc'
        >>> validate_shortcode('ab')
        InvalidShortcodeFormatError: Custom shortcode must be between 3-20 characters (given: 'ab').
    """
    if not isinstance(shortcode, str):
        raise InvalidShortcodeFormatError(f'Shortcode must be of type string (given type: {type(shortcode)}).')

    shortcode = shortcode.strip()
    if not min_length <= len(shortcode) <= max_length:
        raise InvalidShortcodeFormatError(
            f"Custom shortcode must be between {min_length}-{max_length} characters (given: '{shortcode}')."
        )
    if not SHORTCODE_PATTERN.fullmatch(shortcode):
        raise InvalidShortcodeFormatError(f"Custom shortcode can only contain letters and numbers (given: '{shortcode}').")
    return shortcode


def validate_validity_minutes(minutes: int, minimum: int = Validity.MIN, maximum: int = Validity.MAX) -> int:
    """Validate a validity period given in minutes

    Raises:
        InvalidValidityPeriodError:
            If `minutes` is not an integer within [minimum, maximum].
    """
    # bool is an int subclass, reject it explicitly
    if not isinstance(minutes, int) or isinstance(minutes, bool):
        raise InvalidValidityPeriodError(f'Validity period must be an integer number of minutes (given type: {type(minutes)}).')
    if not minimum <= minutes <= maximum:
        raise InvalidValidityPeriodError(f'Validity period must be between {minimum} and {maximum} minutes (given: {minutes}).')
    return minutes
