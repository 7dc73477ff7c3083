"""Application-level exceptions.

Every exception carries a stable `error_code` so that callers sitting outside
the registry (HTTP handlers, CLIs) can report failures as plain values.

Classes:
    LinkRegistryError:
        Base class of every registry error.

    ValidationError:
        Base class of input validation errors.

    InvalidUrlError:
        Raised when the original URL is empty or not a well-formed absolute URL.

    InvalidShortcodeFormatError:
        Raised when a custom shortcode violates the length or charset rules.

    InvalidValidityPeriodError:
        Raised when the validity period is outside the allowed range.

    ShortURLExpiredError:
        Raised when resolving a short URL past its expiry time.

    ConfigurationError / BadConfigurationError:
        Raised when the registry is configured with invalid parameters.

Example:
    >>> from linkregistry.exceptions import InvalidUrlError
    >>> InvalidUrlError.error_code
    'validation:invalid_url'
"""


class LinkRegistryError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:link_registry_error'


class ValidationError(LinkRegistryError):
    """Base exception for all input validation errors."""

    error_code = 'validation:validation_error'


class InvalidUrlError(ValidationError):
    """Raised when the original URL is not a well-formed absolute URL."""

    error_code = 'validation:invalid_url'


class InvalidShortcodeFormatError(ValidationError):
    """Raised when a custom shortcode has a bad length or bad characters."""

    error_code = 'validation:invalid_shortcode_format'


class InvalidValidityPeriodError(ValidationError):
    """Raised when the validity period is not an integer within bounds."""

    error_code = 'validation:invalid_validity_period'


class ShortURLExpiredError(LinkRegistryError):
    """Raised when a short URL is resolved after it expired."""

    error_code = 'link:expired'


class ConfigurationError(LinkRegistryError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the registry is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
