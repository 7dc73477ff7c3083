"""Abstract base class for mapping data access objects (DAOs).

This class establishes a consistent contract for all mapping DAO
implementations, regardless of the underlying storage mechanism.

Responsibilities:
    - Own the shortcode -> MappingRecord collection.
    - Enforce shortcode uniqueness over every stored record, live or expired.
    - Allocate random shortcodes, retrying on collision.
    - Append click events atomically.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkregistry.dao import MappingMemoryDAO

        >>> dao = MappingMemoryDAO()
        >>> record = dao.create('https://example.com/blog/article-123', shortcode='a1b2c3')

        >>> retrieved = dao.get('a1b2c3')
        >>> print(retrieved.original_url)
        https://example.com/blog/article-123

        >>> dao.delete('a1b2c3')
        >>> dao.exists('a1b2c3')
        False
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from linkregistry.models import ClickEvent, MappingRecord


class MappingBaseDAO(ABC):
    """Interface for mapping data access objects (DAOs).

    Methods:
        create(original_url: str, shortcode: str | None, validity_minutes: int) -> MappingRecord:
            Validate the request, allocate a shortcode if needed and store a new record.
            Raises InvalidUrlError, InvalidShortcodeFormatError or InvalidValidityPeriodError on bad input.
            Raises ShortcodeTakenError if the custom shortcode is already stored.
            Raises AllocationExhaustedError if no free random shortcode was found.

        insert(record: MappingRecord) -> MappingBaseDAO:
            Store a ready-made record.
            Raises ShortcodeTakenError if the shortcode is already stored.

        get(shortcode: str) -> MappingRecord:
            Retrieve a record by shortcode.
            Raises ShortcodeNotFoundError if the entry does not exist.

        exists(shortcode: str) -> bool:
            Check whether a shortcode is stored.

        delete(shortcode: str) -> None:
            Remove a record, freeing its shortcode.
            Raises ShortcodeNotFoundError if the entry does not exist.

        list() -> list[MappingRecord]:
            All records, most recently created first.

        hit(shortcode: str, click: ClickEvent) -> MappingRecord:
            Append a click event and increment the click counter.
            Raises ShortcodeNotFoundError if the entry does not exist.

        count() -> int:
            Number of stored records.

        transaction() -> AbstractContextManager:
            Hold the store exclusively, so several calls form one atomic step.

    Subclassing:
        Datastore-specific implementations must extend this class and
        implement all abstract methods.

    NOTE:
        - Records never expire out of the store. Expired records stay listable
          until they are explicitly deleted.
        - Returned records are immutable snapshots.
    """

    @abstractmethod
    def create(self, original_url: str, shortcode: str | None = None, validity_minutes: int | None = None, **kwargs) -> MappingRecord:
        """Create and store a new mapping.

        Args:
            original_url (str):
                The long URL to shorten.

            shortcode (str | None):
                Custom shortcode. A random one is allocated when None or blank.

            validity_minutes (int | None):
                Time-to-live of the mapping. Store default when None.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            MappingRecord: the stored record.

        Raises:
            InvalidUrlError:
                If the URL is empty or malformed.

            InvalidShortcodeFormatError:
                If the custom shortcode violates length or charset rules.

            InvalidValidityPeriodError:
                If the validity period is out of bounds.

            ShortcodeTakenError:
                If the custom shortcode is already stored.

            AllocationExhaustedError:
                If random generation kept colliding with stored shortcodes.
        """
        pass

    @abstractmethod
    def insert(self, record: MappingRecord, **kwargs) -> 'MappingBaseDAO':
        """Insert a ready-made MappingRecord into the data store.

        Returns:
            MappingBaseDAO: self (for method chaining)

        Raises:
            ShortcodeTakenError:
                If a record with the same shortcode already exists.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> MappingRecord:
        """Retrieve a MappingRecord from the data store by its shortcode.

        Raises:
            ShortcodeNotFoundError:
                If no record with the given shortcode exists.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> None:
        """Delete a MappingRecord, making its shortcode available again.

        Raises:
            ShortcodeNotFoundError:
                If no record with the given shortcode exists.
        """
        pass

    @abstractmethod
    def list(self, **kwargs) -> list[MappingRecord]:
        """Return every stored record, most recently created first."""
        pass

    @abstractmethod
    def hit(self, shortcode: str, click: ClickEvent, **kwargs) -> MappingRecord:
        """Record a click on a stored mapping.

        Args:
            shortcode (str):
                Shortcode of the clicked mapping.

            click (ClickEvent):
                Click event appended to the record's history.

        Returns:
            MappingRecord: the updated record.

        Raises:
            ShortcodeNotFoundError:
                If no record with the given shortcode exists.
        """
        pass

    @abstractmethod
    def count(self, **kwargs) -> int:
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        pass
