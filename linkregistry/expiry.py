"""Expiry policy for short URL mappings

Expiry never removes anything from the data store: an expired mapping stays
listable and retrievable until explicitly deleted, it only stops resolving.

Functions:
    is_expired(record, now) -> bool
        True if `now` is past the record's expiry time.

Classes:
    ExpirySweeper:
        Cancellable background thread which periodically counts and logs
        expired mappings.

Example:
    >>> from linkregistry.expiry import ExpirySweeper
    >>> with ExpirySweeper(dao, interval=60.0) as sweeper:
    ...     report = sweeper.sweep()
    >>> report.expired
    2
"""

import logging
import threading
from datetime import datetime

from linkregistry.constants import EXPIRED_URLS_DETECTED
from linkregistry.dao.base import MappingBaseDAO
from linkregistry.models import MappingRecord, SweepReport
from linkregistry.types import Clock
from linkregistry.utils.helpers import utcnow


logger = logging.getLogger(__name__)


def is_expired(record: MappingRecord, now: datetime) -> bool:
    """Check whether a mapping is expired at reference time `now`

    A mapping is still valid at exactly `expires_at`, and expired strictly after.

    Example:
        >>> is_expired(record, record.expires_at)
        False
        >>> is_expired(record, record.expires_at + timedelta(microseconds=1))
        True
    """
    return now > record.expires_at


class ExpirySweeper:
    """Periodically report expired mappings

    The sweeper only reads from the data store, so it can be stopped at any
    moment without leaving the store in an inconsistent state.

    Attributes:
        dao (MappingBaseDAO): data store to inspect.
        interval (float): seconds between two sweeps.
        clock (Clock): source of the reference time.
    """

    def __init__(self, dao: MappingBaseDAO, interval: float = 60.0, clock: Clock = utcnow):
        if interval <= 0:
            raise ValueError(f'Sweep interval must be positive (given value: {interval}).')

        self.dao = dao
        self.interval = interval
        self.clock = clock
        # (shortcode, created_at) of mappings already reported as expired
        self._reported: set[tuple[str, datetime]] = set()
        self._reported_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def sweep(self) -> SweepReport:
        """Count expired mappings and log the ones which expired since the last sweep

        Returns:
            SweepReport:
                total number of expired mappings and shortcodes of newly
                expired ones (oldest mapping first).
        """
        now = self.clock()
        expired = [record for record in reversed(self.dao.list()) if is_expired(record, now)]
        keys = {(record.shortcode, record.created_at) for record in expired}

        with self._reported_lock:
            newly_expired = tuple(record.shortcode for record in expired if (record.shortcode, record.created_at) not in self._reported)
            # Forget deleted mappings so the set does not grow without bound
            self._reported = keys

        if expired:
            logger.info(
                'Expired URLs detected.',
                extra={'event': EXPIRED_URLS_DETECTED, 'count': len(expired), 'newlyExpired': list(newly_expired)},
            )
        return SweepReport(checked_at=now, expired=len(expired), newly_expired=newly_expired)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> 'ExpirySweeper':
        """Start sweeping in a daemon thread. Does nothing if already running."""
        if self.running:
            return self

        # One stop event per thread: a thread outliving a timed-out stop() still sees its own signal
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,), name='linkregistry-expiry-sweeper', daemon=True)
        self._thread.start()
        logger.debug('Expiry sweeper started.', extra={'interval': self.interval})
        return self

    def stop(self, timeout: float | None = None) -> None:
        """Signal the sweeper thread to stop and wait for it to finish"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning('Expiry sweeper still finishing a sweep after stop.', extra={'timeout': timeout})
            self._thread = None
            logger.debug('Expiry sweeper stopped.')

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.sweep()
            except Exception:
                # Keep the sweeper alive; the next tick retries
                logger.exception('Expiry sweep failed.')

    def __enter__(self) -> 'ExpirySweeper':
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()
