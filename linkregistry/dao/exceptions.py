"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortcodeNotFoundError:
        Raised when no mapping with the requested shortcode is stored.

    ShortcodeTakenError:
        Raised when attempting to store a mapping under a shortcode already in use.

    AllocationExhaustedError:
        Raised when no free shortcode was found within the allowed number of attempts.

Example:
    >>> from linkregistry.dao.exceptions import ShortcodeNotFoundError
    >>> raise ShortcodeNotFoundError("Short URL with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    linkregistry.dao.exceptions.ShortcodeNotFoundError: Short URL with code 'abc123' not found.
"""

from linkregistry.exceptions import LinkRegistryError


class DAOError(LinkRegistryError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortcodeNotFoundError(DAOError):
    """Exception raised when a mapping is not found in the data store."""

    error_code = 'dao:shortcode_not_found'


class ShortcodeTakenError(DAOError):
    """Exception raised when a shortcode is already used by a stored mapping."""

    error_code = 'dao:shortcode_taken'


class AllocationExhaustedError(DAOError):
    """Exception raised when random shortcode generation keeps colliding."""

    error_code = 'dao:allocation_exhausted'
