"""Data Access Object (DAO) implementation keeping short URL mappings in memory

This module provides a process-local implementation of MappingBaseDAO. It is
the registry's single source of truth: nothing outside the DAO holds a
reference to the stored collection, and every record handed out is a frozen
snapshot.

Responsibilities:
    - Validate creation requests and allocate shortcodes;
    - Insert, retrieve, list and delete mappings;
    - Append click events atomically;
    - Serialize all access through a single re-entrant lock.

Classes:
    MappingMemoryDAO:
        DAO for storing and retrieving MappingRecord instances in memory.

Example:
    >>> from linkregistry.dao.memory import MappingMemoryDAO
    >>> dao = MappingMemoryDAO()
    >>> record = dao.create('https://example.com/page', shortcode='abc123', validity_minutes=60)
    >>> dao.get('abc123').original_url
    'https://example.com/page'
    >>> dao.hit('abc123', ClickEvent(timestamp=utcnow(), referrer='Direct')).click_count
    1
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta

from beartype import beartype

from linkregistry.models import ClickEvent, MappingRecord
from linkregistry.dao.base import MappingBaseDAO
from linkregistry.dao.exceptions import AllocationExhaustedError, ShortcodeNotFoundError, ShortcodeTakenError
from linkregistry.types import Clock
from linkregistry.utils.config import RegistryConfig
from linkregistry.utils.helpers import utcnow
from linkregistry.utils.shortener import generate_shortcode
from linkregistry.utils.validators import validate_url, validate_shortcode, validate_validity_minutes


logger = logging.getLogger(__name__)


class MappingMemoryDAO(MappingBaseDAO):
    """In-memory Data Access Object (DAO) for managing short URL mappings

    Attributes:
        config (RegistryConfig):
            Shortcode, validity and allocation parameters.
        clock (Clock):
            Source of the current time, stamped as `created_at`.

    NOTE:
        Records are kept in insertion order. Since records are inserted at
        creation time, insertion order is creation order, and deleting then
        re-creating a shortcode moves it to the newest position.
    """

    def __init__(self, config: RegistryConfig | None = None, clock: Clock = utcnow):
        self.config = config or RegistryConfig()
        self.clock = clock
        self._records: dict[str, MappingRecord] = {}
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator['MappingMemoryDAO']:
        """Hold the store lock for the duration of the `with` block

        Example:
            >>> with dao.transaction():
            ...     record = dao.get('abc123')
            ...     dao.hit('abc123', click)
        """
        with self._lock:
            yield self

    @beartype
    def create(self, original_url: str, shortcode: str | None = None, validity_minutes: int | None = None, **kwargs) -> MappingRecord:
        """Validate a creation request and store the new mapping

        Input validation runs before the lock is taken. The uniqueness check,
        the random allocation retries and the insert run under the lock as a
        single step, so two concurrent requests can never claim the same
        shortcode.

        Args:
            original_url (str):
                Long URL to shorten. Surrounding whitespace is stripped.
            shortcode (str | None):
                Custom shortcode. A random one is allocated when None or blank.
            validity_minutes (int | None):
                Time-to-live in minutes. `config.default_validity_minutes` when None.

        Returns:
            MappingRecord: the stored record.

        Raises:
            InvalidUrlError, InvalidShortcodeFormatError, InvalidValidityPeriodError:
                On malformed input.
            ShortcodeTakenError:
                If the custom shortcode is already stored (expired or not).
            AllocationExhaustedError:
                If `config.max_allocation_attempts` random candidates all collided.
        """
        original_url = validate_url(original_url)
        if validity_minutes is None:
            validity_minutes = self.config.default_validity_minutes
        validity_minutes = validate_validity_minutes(
            validity_minutes,
            self.config.min_validity_minutes,
            self.config.max_validity_minutes,
        )
        if shortcode is not None and shortcode.strip():
            shortcode = validate_shortcode(
                shortcode,
                self.config.custom_shortcode_min_length,
                self.config.custom_shortcode_max_length,
            )
        else:
            shortcode = None

        with self._lock:
            if shortcode is None:
                shortcode = self._allocate_shortcode()
            elif shortcode in self._records:
                raise ShortcodeTakenError(f"Short URL with code '{shortcode}' already exists.")

            now = self.clock()
            record = MappingRecord(
                shortcode=shortcode,
                original_url=original_url,
                created_at=now,
                expires_at=now + timedelta(minutes=validity_minutes),
            )
            self._records[shortcode] = record
        return record

    def _allocate_shortcode(self) -> str:
        """Draw random shortcodes until one is free. Caller must hold the lock."""
        for attempt in range(1, self.config.max_allocation_attempts + 1):
            candidate = generate_shortcode(self.config.shortcode_length, self.config.alphabet)
            if candidate not in self._records:
                return candidate
            logger.debug('Generated shortcode collided with a stored one.', extra={'shortcode': candidate, 'attempt': attempt})
        raise AllocationExhaustedError(
            f'No free shortcode found after {self.config.max_allocation_attempts} attempts '
            f'({len(self._records)} shortcodes in use).'
        )

    @beartype
    def insert(self, record: MappingRecord, **kwargs) -> 'MappingMemoryDAO':
        """Insert a ready-made mapping

        Raises:
            ShortcodeTakenError:
                If a mapping with the same shortcode already exists.
        """
        with self._lock:
            if record.shortcode in self._records:
                raise ShortcodeTakenError(f"Short URL with code '{record.shortcode}' already exists.")
            self._records[record.shortcode] = record
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> MappingRecord:
        """Retrieve a stored mapping by shortcode

        Raises:
            ShortcodeNotFoundError:
                If the shortcode is not stored.
        """
        with self._lock:
            try:
                return self._records[shortcode]
            except KeyError:
                raise ShortcodeNotFoundError(f"Short URL with code '{shortcode}' not found.") from None

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            return shortcode in self._records

    @beartype
    def delete(self, shortcode: str, **kwargs) -> None:
        """Delete a stored mapping, freeing its shortcode for reuse

        Raises:
            ShortcodeNotFoundError:
                If the shortcode is not stored.
        """
        with self._lock:
            if self._records.pop(shortcode, None) is None:
                raise ShortcodeNotFoundError(f"Short URL with code '{shortcode}' not found.")

    @beartype
    def hit(self, shortcode: str, click: ClickEvent, **kwargs) -> MappingRecord:
        """Append a click event to a stored mapping and increment its counter

        The successor record replaces the stored one in a single assignment
        under the lock, so concurrent hits never lose an update.

        Raises:
            ShortcodeNotFoundError:
                If the shortcode is not stored.

        Example:
            >>> dao.hit('abc123', ClickEvent(timestamp=utcnow(), referrer='Direct')).click_count
            1
        """
        with self._lock:
            record = self.get(shortcode).with_click(click)
            self._records[shortcode] = record
        return record

    def count(self, **kwargs) -> int:
        with self._lock:
            return len(self._records)

    def list(self, **kwargs) -> list[MappingRecord]:
        """Return a snapshot of all mappings, most recently created first"""
        with self._lock:
            return [*reversed(self._records.values())]
