"""Click recording for short URL resolutions

Classes:
    ClickRecorder:
        Resolve a shortcode to its original URL, recording the click.
"""

import logging

from linkregistry.constants import Defaults, SHORT_URL_CLICKED, SHORT_URL_EXPIRED
from linkregistry.dao.base import MappingBaseDAO
from linkregistry.exceptions import ShortURLExpiredError
from linkregistry.expiry import is_expired
from linkregistry.models import ClickEvent
from linkregistry.types import Clock
from linkregistry.utils.helpers import utcnow


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Record clicks on stored mappings

    Attributes:
        dao (MappingBaseDAO): data store holding the mappings.
        clock (Clock): source of click timestamps and of the expiry reference time.
    """

    def __init__(self, dao: MappingBaseDAO, clock: Clock = utcnow):
        self.dao = dao
        self.clock = clock

    def record_click(self, shortcode: str, referrer: str | None = None) -> str:
        """Record a click on a mapping and return its original URL

        The lookup, the expiry check and the click append run inside one data
        store transaction, so concurrent clicks on the same mapping are all
        counted and none lands on an expired mapping.

        Args:
            shortcode (str):
                Shortcode being resolved.
            referrer (str | None):
                Originating context of the click. Recorded as 'Direct' when
                None or blank.

        Returns:
            str: the mapping's original URL.

        Raises:
            ShortcodeNotFoundError:
                If the shortcode is not stored.
            ShortURLExpiredError:
                If the mapping expired. Retrying will not succeed.

        Example:
            >>> recorder.record_click('abc123', referrer='https://news.example')
            'https://example.com/page'
        """
        referrer = (referrer or '').strip() or Defaults.REFERRER

        with self.dao.transaction():
            record = self.dao.get(shortcode)
            now = self.clock()
            if is_expired(record, now):
                logger.warning(
                    'URL access attempt failed - expired.',
                    extra={'shortcode': shortcode, 'expiresAt': record.expires_at.isoformat(), 'event': SHORT_URL_EXPIRED},
                )
                raise ShortURLExpiredError(f"Short URL with code '{shortcode}' expired at {record.expires_at.isoformat()}.")

            record = self.dao.hit(shortcode, ClickEvent(timestamp=now, referrer=referrer))

        logger.info(
            'URL clicked.',
            extra={'shortcode': shortcode, 'totalClicks': record.click_count, 'referrer': referrer, 'event': SHORT_URL_CLICKED},
        )
        return record.original_url
