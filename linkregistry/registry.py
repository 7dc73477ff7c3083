"""Short URL registry facade

`LinkRegistry` is the interface presentation and transport layers call into.
It wires the data store, the click recorder, the analytics aggregator and the
expiry sweeper together and projects stored records into read-only views.

Operations:
    - create_short_url: validate, allocate a shortcode and store a mapping
    - resolve:          expiry check + click recording, returns the original URL
    - get_short_url:    look a single mapping up
    - delete_short_url: remove a mapping, freeing its shortcode
    - list_all:         every mapping, newest first
    - stats:            total / clicks / active / expired counters
    - top_performers:   most clicked mappings
    - recent_activity:  latest clicks of one mapping
    - recent_urls:      newest mappings

Every failure is raised as a LinkRegistryError subclass carrying an
`error_code`. Nothing is mutated when an operation fails.

Example:
    >>> from linkregistry import LinkRegistry
    >>> with LinkRegistry() as registry:
    ...     view = registry.create_short_url('https://example.com/page', validity_minutes=1)
    ...     registry.resolve(view.shortcode)
    'https://example.com/page'
    >>> registry.stats()
    RegistryStats(total_urls=1, total_clicks=1, active_urls=1, expired_urls=0)
"""

import logging
from datetime import datetime

from beartype import beartype

from linkregistry.analytics import AnalyticsAggregator
from linkregistry.clicks import ClickRecorder
from linkregistry.constants import SHORT_URL_CREATED, SHORT_URL_REJECTED, SHORT_URL_DELETED
from linkregistry.dao.base import MappingBaseDAO
from linkregistry.dao.exceptions import ShortcodeNotFoundError, ShortcodeTakenError
from linkregistry.dao.memory import MappingMemoryDAO
from linkregistry.exceptions import ValidationError
from linkregistry.expiry import ExpirySweeper, is_expired
from linkregistry.models import ClickEvent, MappingRecord, MappingRecordView, RegistryStats
from linkregistry.types import Clock
from linkregistry.utils.config import RegistryConfig
from linkregistry.utils.helpers import utcnow, get_short_url


logger = logging.getLogger(__name__)


class LinkRegistry:
    """Shortened URL registry with click analytics

    Attributes:
        config (RegistryConfig): registry parameters.
        dao (MappingBaseDAO): data store owning every mapping.
        clicks (ClickRecorder): click recording on resolution.
        analytics (AnalyticsAggregator): derived statistics.
        sweeper (ExpirySweeper): background expiry reporting.
    """

    def __init__(self, config: RegistryConfig | None = None, dao: MappingBaseDAO | None = None, clock: Clock = utcnow):
        self.config = (config or RegistryConfig()).validate()
        self.clock = clock
        self.dao = dao if dao is not None else MappingMemoryDAO(config=self.config, clock=clock)
        self.clicks = ClickRecorder(self.dao, clock=clock)
        self.analytics = AnalyticsAggregator(self.dao, clock=clock)
        self.sweeper = ExpirySweeper(self.dao, interval=self.config.sweep_interval_seconds, clock=clock)

    def _view(self, record: MappingRecord, now: datetime) -> MappingRecordView:
        return MappingRecordView.from_record(
            record,
            short_url=get_short_url(record.shortcode, self.config.base_url),
            is_expired=is_expired(record, now),
        )

    def _views(self, records: list[MappingRecord]) -> list[MappingRecordView]:
        now = self.clock()
        return [self._view(record, now) for record in records]

    @beartype
    def create_short_url(
        self,
        original_url: str,
        custom_shortcode: str | None = None,
        validity_minutes: int | None = None,
    ) -> MappingRecordView:
        """Shorten `original_url`

        Args:
            original_url (str):
                Absolute URL to shorten.
            custom_shortcode (str | None):
                Requested shortcode. Randomly generated when None or blank.
            validity_minutes (int | None):
                Minutes until the short URL expires. Configured default when None.

        Returns:
            MappingRecordView: the created mapping.

        Raises:
            InvalidUrlError, InvalidShortcodeFormatError, InvalidValidityPeriodError:
                On malformed input.
            ShortcodeTakenError:
                If `custom_shortcode` is already stored.
            AllocationExhaustedError:
                If no free random shortcode could be found.
        """
        logger.info(
            'Attempting to create short URL.',
            extra={'originalUrl': original_url, 'customShortcode': custom_shortcode, 'validityMinutes': validity_minutes},
        )
        try:
            record = self.dao.create(original_url, shortcode=custom_shortcode, validity_minutes=validity_minutes)
        except (ValidationError, ShortcodeTakenError) as e:
            logger.warning(
                'Short URL creation failed.',
                extra={'reason': str(e), 'errorCode': e.error_code, 'event': SHORT_URL_REJECTED},
            )
            raise

        logger.info(
            'Short URL created successfully.',
            extra={
                'shortcode': record.shortcode,
                'originalUrl': record.original_url,
                'expiresAt': record.expires_at.isoformat(),
                'event': SHORT_URL_CREATED,
            },
        )
        return self._view(record, self.clock())

    @beartype
    def resolve(self, shortcode: str, referrer: str | None = None) -> str:
        """Resolve a shortcode to its original URL, recording the click

        Raises:
            ShortcodeNotFoundError: If the shortcode is not stored.
            ShortURLExpiredError: If the mapping expired.
        """
        try:
            return self.clicks.record_click(shortcode, referrer)
        except ShortcodeNotFoundError:
            logger.info('URL access attempt failed - not found.', extra={'shortcode': shortcode})
            raise

    @beartype
    def get_short_url(self, shortcode: str) -> MappingRecordView:
        """Look a mapping up without recording a click

        Raises:
            ShortcodeNotFoundError: If the shortcode is not stored.
        """
        return self._view(self.dao.get(shortcode), self.clock())

    @beartype
    def delete_short_url(self, shortcode: str) -> None:
        """Delete a mapping. Its shortcode becomes available again.

        Raises:
            ShortcodeNotFoundError: If the shortcode is not stored.
        """
        self.dao.delete(shortcode)
        logger.info('URL deleted.', extra={'shortcode': shortcode, 'event': SHORT_URL_DELETED})

    def list_all(self) -> list[MappingRecordView]:
        """Every stored mapping, expired ones included, newest first"""
        return self._views(self.dao.list())

    def stats(self) -> RegistryStats:
        return self.analytics.stats()

    @beartype
    def top_performers(self, n: int | None = None) -> list[MappingRecordView]:
        """The `n` most clicked mappings (configured limit when None)"""
        n = self.config.top_performers_limit if n is None else n
        return self._views(self.analytics.top_by_clicks(n))

    @beartype
    def recent_activity(self, shortcode: str, k: int | None = None) -> list[ClickEvent]:
        """The last `k` clicks on a mapping, most recent first (configured limit when None)

        Raises:
            ShortcodeNotFoundError: If the shortcode is not stored.
        """
        k = self.config.recent_activity_limit if k is None else k
        return self.analytics.recent_activity(self.dao.get(shortcode), k)

    @beartype
    def recent_urls(self, n: int | None = None) -> list[MappingRecordView]:
        """The `n` newest mappings (configured limit when None)"""
        n = self.config.recent_urls_limit if n is None else n
        return self._views(self.analytics.recent_records(n))

    def start_sweeper(self) -> None:
        self.sweeper.start()

    def stop_sweeper(self, timeout: float | None = None) -> None:
        self.sweeper.stop(timeout)

    def close(self) -> None:
        self.stop_sweeper()

    def __enter__(self) -> 'LinkRegistry':
        self.start_sweeper()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
