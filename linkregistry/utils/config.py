"""Utility functions for registry configuration management.

Configuration is assembled from three layers, later layers overriding
earlier ones:

    1. Built-in defaults (`RegistryConfig()`).
    2. An optional YAML document, given explicitly or through the
       `LINKREGISTRY_CONFIG` environment variable.
    3. Environment variable overrides (`LINKREGISTRY_BASE_URL`,
       `LINKREGISTRY_DEFAULT_VALIDITY_MINUTES`,
       `LINKREGISTRY_SWEEP_INTERVAL_SECONDS`).

The YAML document follows this structure:

    base_url: https://short.ly
    default_validity_minutes: 30
    environments:
      dev:
        base_url: http://localhost:8000
      prod:
        sweep_interval_seconds: 300

Top-level keys apply to every environment. Keys under
`environments.<APP_ENV>` are merged on top for the active environment.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    load_config(path: str | Path | None = None) -> RegistryConfig
        Build and validate the registry configuration.

Example:
    >>> from linkregistry.utils.config import load_config
    >>> config = load_config('config/registry.yml')
    >>> config.base_url
    'https://short.ly'
"""

import os
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from linkregistry.constants import ENV, Defaults, Validity, CustomShortcode, Limits
from linkregistry.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryConfig:
    """Tunable registry parameters.

    Attributes:
        shortcode_length (int): length of generated shortcodes.
        alphabet (str): characters generated shortcodes are drawn from.
        default_validity_minutes (int): validity used when none is requested.
        min_validity_minutes (int): smallest accepted validity period.
        max_validity_minutes (int): largest accepted validity period.
        custom_shortcode_min_length (int): shortest accepted custom shortcode.
        custom_shortcode_max_length (int): longest accepted custom shortcode.
        base_url (str): prefix of every short URL.
        max_allocation_attempts (int): generator collisions tolerated per creation.
        sweep_interval_seconds (float): period of the background expiry sweep.
        top_performers_limit (int): default size of the top performers view.
        recent_activity_limit (int): default number of recent clicks shown.
        recent_urls_limit (int): default number of recent URLs shown.
    """

    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    alphabet: str = Defaults.ALPHABET
    default_validity_minutes: int = Validity.DEFAULT
    min_validity_minutes: int = Validity.MIN
    max_validity_minutes: int = Validity.MAX
    custom_shortcode_min_length: int = CustomShortcode.MIN_LENGTH
    custom_shortcode_max_length: int = CustomShortcode.MAX_LENGTH
    base_url: str = Defaults.BASE_URL
    max_allocation_attempts: int = Defaults.MAX_ALLOCATION_ATTEMPTS
    sweep_interval_seconds: float = Defaults.SWEEP_INTERVAL_SECONDS
    top_performers_limit: int = Limits.TOP_PERFORMERS
    recent_activity_limit: int = Limits.RECENT_ACTIVITY
    recent_urls_limit: int = Limits.RECENT_URLS

    def validate(self) -> 'RegistryConfig':
        """Check that all parameters are consistent with each other

        Returns:
            RegistryConfig: self (for method chaining)

        Raises:
            BadConfigurationError: If any parameter is out of range.
        """
        problems = []
        if self.shortcode_length < 1:
            problems.append('shortcode_length must be positive')
        if not self.alphabet:
            problems.append('alphabet must be non-empty')
        if len(set(self.alphabet)) != len(self.alphabet):
            problems.append('alphabet must not repeat characters')
        if self.min_validity_minutes < 1:
            problems.append('min_validity_minutes must be positive')
        if self.min_validity_minutes > self.max_validity_minutes:
            problems.append('min_validity_minutes exceeds max_validity_minutes')
        if not self.min_validity_minutes <= self.default_validity_minutes <= self.max_validity_minutes:
            problems.append('default_validity_minutes must lie within the validity bounds')
        if self.custom_shortcode_min_length < 1:
            problems.append('custom_shortcode_min_length must be positive')
        if self.custom_shortcode_min_length > self.custom_shortcode_max_length:
            problems.append('custom_shortcode_min_length exceeds custom_shortcode_max_length')
        if not self.base_url:
            problems.append('base_url must be non-empty')
        if self.max_allocation_attempts < 1:
            problems.append('max_allocation_attempts must be positive')
        if self.sweep_interval_seconds <= 0:
            problems.append('sweep_interval_seconds must be positive')
        if min(self.top_performers_limit, self.recent_activity_limit, self.recent_urls_limit) < 0:
            problems.append('view limits must not be negative')

        if problems:
            raise BadConfigurationError(f'Invalid registry configuration: {"; ".join(problems)}.')
        return self


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.APP_ENV, 'local').lower()


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw YAML/env value to the type of the RegistryConfig field `name`"""
    field_type = {f.name: f.type for f in fields(RegistryConfig)}[name]
    try:
        if field_type is int and isinstance(value, float) and not value.is_integer():
            raise BadConfigurationError(f"Bad value for '{name}': {value!r} is not a whole number.")
        if field_type is int and not isinstance(value, bool):
            return int(value)
        if field_type is float and not isinstance(value, bool):
            return float(value)
        if field_type is str and isinstance(value, (str, int, float)):
            return str(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"Bad value for '{name}': {value!r}.") from e
    raise BadConfigurationError(f"Bad value for '{name}': {value!r}.")


def _overrides_from_document(document: Any) -> dict[str, Any]:
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration document must be a mapping (given type: {type(document)}).')

    document = dict(document)
    environments = document.pop('environments', None) or {}
    if not isinstance(environments, dict):
        raise BadConfigurationError("'environments' must be a mapping of environment name to settings.")

    section = environments.get(app_env()) or {}
    if not isinstance(section, dict):
        raise BadConfigurationError(f"'environments.{app_env()}' must be a mapping.")
    return document | section


def _overrides_from_environment() -> dict[str, Any]:
    env_fields = {
        ENV.BASE_URL: 'base_url',
        ENV.DEFAULT_VALIDITY_MINUTES: 'default_validity_minutes',
        ENV.SWEEP_INTERVAL_SECONDS: 'sweep_interval_seconds',
    }
    return {name: os.environ[env] for env, name in env_fields.items() if os.environ.get(env)}


def load_config(path: str | Path | None = None) -> RegistryConfig:
    """Load the registry configuration

    Args:
        path (str | Path | None):
            YAML configuration file. Falls back to `LINKREGISTRY_CONFIG`;
            when neither is set only defaults and env overrides apply.

    Returns:
        RegistryConfig: validated configuration.

    Raises:
        FileNotFoundError:
            If the configuration file does not exist.
        BadConfigurationError:
            If the document is malformed, has unknown keys or inconsistent values.

    Example:
        >>> os.environ['LINKREGISTRY_BASE_URL'] = 'https://lnk.example'
        >>> load_config().base_url
        'https://lnk.example'
    """
    path = path or os.environ.get(ENV.CONFIG_PATH)

    overrides: dict[str, Any] = {}
    if path:
        path = Path(path)
        logger.debug('Loading registry configuration from file.', extra={'path': str(path), 'appEnv': app_env()})
        with path.open('r', encoding='utf-8') as f:
            try:
                overrides |= _overrides_from_document(yaml.safe_load(f))
            except yaml.YAMLError as e:
                raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e
    overrides |= _overrides_from_environment()

    known = {f.name for f in fields(RegistryConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise BadConfigurationError(f'Unknown configuration keys: {", ".join(map(repr, unknown))}.')

    config = replace(RegistryConfig(), **{name: _coerce(name, value) for name, value in overrides.items()})
    logger.debug('Loaded registry configuration.', extra={'overrides': sorted(overrides)})
    return config.validate()
