"""Read-side analytics over the mappings stored in a data store

Every figure is computed from a fresh `dao.list()` snapshot on each call;
nothing is cached.

Classes:
    AnalyticsAggregator:
        Totals, active/expired split, top performers and recent activity.

Example:
    >>> analytics = AnalyticsAggregator(dao)
    >>> analytics.stats()
    RegistryStats(total_urls=3, total_clicks=12, active_urls=2, expired_urls=1)
    >>> [record.shortcode for record in analytics.top_by_clicks(2)]
    ['abc123', 'xyz789']
"""

from datetime import datetime

from linkregistry.dao.base import MappingBaseDAO
from linkregistry.expiry import is_expired
from linkregistry.models import ClickEvent, MappingRecord, RegistryStats
from linkregistry.types import Clock
from linkregistry.utils.helpers import utcnow


def _require_non_negative(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f'{name} must be of type integer (given type: {type(value)}).')
    if value < 0:
        raise ValueError(f'{name} must be a non-negative integer (given value: {value}).')
    return value


class AnalyticsAggregator:
    def __init__(self, dao: MappingBaseDAO, clock: Clock = utcnow):
        self.dao = dao
        self.clock = clock

    def total_count(self) -> int:
        return len(self.dao.list())

    def total_clicks(self) -> int:
        return sum(record.click_count for record in self.dao.list())

    def active_count(self, now: datetime | None = None) -> int:
        now = now or self.clock()
        return sum(1 for record in self.dao.list() if not is_expired(record, now))

    def expired_count(self, now: datetime | None = None) -> int:
        now = now or self.clock()
        return sum(1 for record in self.dao.list() if is_expired(record, now))

    def stats(self) -> RegistryStats:
        """Compute all counters from one snapshot against one reference time"""
        now = self.clock()
        records = self.dao.list()
        expired = sum(1 for record in records if is_expired(record, now))
        return RegistryStats(
            total_urls=len(records),
            total_clicks=sum(record.click_count for record in records),
            active_urls=len(records) - expired,
            expired_urls=expired,
        )

    def top_by_clicks(self, n: int) -> list[MappingRecord]:
        """Return the `n` most clicked mappings

        Sorted by click count descending. Ties keep creation order, earlier
        created first.
        """
        _require_non_negative('n', n)
        oldest_first = self.dao.list()[::-1]
        return sorted(oldest_first, key=lambda record: -record.click_count)[:n]

    def recent_activity(self, record: MappingRecord, k: int) -> list[ClickEvent]:
        """Return the last `k` clicks of `record`, most recent first"""
        _require_non_negative('k', k)
        return [*reversed(record.click_history)][:k]

    def recent_records(self, n: int) -> list[MappingRecord]:
        """Return the `n` most recently created mappings, newest first"""
        _require_non_negative('n', n)
        return self.dao.list()[:n]
