from datetime import datetime, timedelta, UTC

import pytest

from linkregistry import LinkRegistry, RegistryConfig
from linkregistry.dao import MappingMemoryDAO
from linkregistry.models import ClickEvent, MappingRecord


@pytest.fixture
def config() -> RegistryConfig:
    return RegistryConfig(base_url='https://short.test')


@pytest.fixture
def dao(config: RegistryConfig) -> MappingMemoryDAO:
    return MappingMemoryDAO(config=config)


@pytest.fixture
def registry(config: RegistryConfig, dao: MappingMemoryDAO) -> LinkRegistry:
    _registry = LinkRegistry(config=config, dao=dao)
    yield _registry
    _registry.close()


@pytest.fixture
def make_record():
    """Build MappingRecord instances with sensible defaults."""

    def _make_record(
        shortcode: str = 'abc123',
        original_url: str = 'https://example.com/page',
        created_at: datetime = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
        validity_minutes: int = 30,
        clicks: int = 0,
    ) -> MappingRecord:
        history = tuple(ClickEvent(timestamp=created_at + timedelta(seconds=i + 1), referrer=f'ref-{i}') for i in range(clicks))
        return MappingRecord(
            shortcode=shortcode,
            original_url=original_url,
            created_at=created_at,
            expires_at=created_at + timedelta(minutes=validity_minutes),
            click_count=clicks,
            click_history=history,
        )

    return _make_record
