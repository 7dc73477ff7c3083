from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True)
class ClickEvent:
    """Represent one successful resolution of a short URL.

    Attributes:
        timestamp (datetime):
            Moment the short URL was resolved.
        referrer (str):
            Originating context of the click, 'Direct' when none was given.
    """

    timestamp: datetime
    referrer: str


@dataclass(frozen=True)
class MappingRecord:
    """Represent a shortened URL mapping and its click analytics.

    Records are immutable snapshots. Recording a click produces a successor
    record (see `with_click()`) which the data store swaps in for the old one.

    Attributes:
        shortcode (str):
            The unique short identifier representing the shortened URL.
        original_url (str):
            The original long URL that the shortcode resolves to.
        created_at (datetime):
            Moment the mapping was created.
        expires_at (datetime):
            Moment after which the mapping no longer resolves.
        click_count (int):
            Number of successful resolutions.
        click_history (tuple[ClickEvent, ...]):
            Successful resolutions in chronological order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> record = MappingRecord(
        ...     shortcode='abc123',
        ...     original_url='https://example.com/article/123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> record.click_count
        0
        >>> record.with_click(ClickEvent(timestamp=now, referrer='Direct')).click_count
        1
    """

    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    click_count: int = 0
    click_history: tuple[ClickEvent, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.expires_at <= self.created_at:
            raise ValueError(f'Expiry time must be later than creation time (given: {self.created_at} -> {self.expires_at}).')
        if self.click_count != len(self.click_history):
            raise ValueError(f'Click count ({self.click_count}) must match click history length ({len(self.click_history)}).')

    def with_click(self, click: ClickEvent) -> 'MappingRecord':
        """Return a copy of this record with `click` appended to its history"""
        return replace(
            self,
            click_count=self.click_count + 1,
            click_history=(*self.click_history, click),
        )
