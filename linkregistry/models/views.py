"""Read-only projections handed to callers outside the registry.

Classes:
    MappingRecordView:
        MappingRecord fields plus derived `is_expired` and `short_url`.
    RegistryStats:
        Aggregate counters over all stored mappings.
    SweepReport:
        Outcome of a single expiry sweep.
"""

from dataclasses import dataclass, asdict
from datetime import datetime

from linkregistry.models.mapping_record import ClickEvent, MappingRecord
from linkregistry.types import JSONDict


# fmt: off
@dataclass(frozen=True)
class MappingRecordView:
    shortcode: str                            # Unique short identifier
    original_url: str                         # Original long URL
    short_url: str                            # Base URL + shortcode
    created_at: datetime                      # Creation time
    expires_at: datetime                      # Expiry time
    click_count: int                          # Successful resolutions
    click_history: tuple[ClickEvent, ...]     # Chronological click events
    is_expired: bool                          # Expiry state at projection time
# fmt: on

    @classmethod
    def from_record(cls, record: MappingRecord, *, short_url: str, is_expired: bool) -> 'MappingRecordView':
        return cls(
            shortcode=record.shortcode,
            original_url=record.original_url,
            short_url=short_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            click_count=record.click_count,
            click_history=record.click_history,
            is_expired=is_expired,
        )

    def to_dict(self) -> JSONDict:
        """Return a JSON-serializable representation of the view

        Example:
            >>> view.to_dict()['click_history']
            [{'timestamp': '2025-10-15T12:00:00+00:00', 'referrer': 'Direct'}]
        """
        return {
            'shortcode': self.shortcode,
            'original_url': self.original_url,
            'short_url': self.short_url,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
            'click_count': self.click_count,
            'click_history': [
                {'timestamp': click.timestamp.isoformat(), 'referrer': click.referrer}
                for click in self.click_history
            ],
            'is_expired': self.is_expired,
        }


@dataclass(frozen=True)
class RegistryStats:
    total_urls: int
    total_clicks: int
    active_urls: int
    expired_urls: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class SweepReport:
    checked_at: datetime
    expired: int
    newly_expired: tuple[str, ...] = ()
