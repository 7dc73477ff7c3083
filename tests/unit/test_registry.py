"""Unit tests for the LinkRegistry facade in registry.py.

Test coverage includes:

1. Creation
   - Views carry derived short_url / is_expired, configured defaults apply.
   - Custom shortcode acceptance, format errors, taken shortcodes.

2. Resolution
   - Round trip, click accounting, TTL boundary, expired and missing codes.

3. Deletion and slot reuse

4. Listing and analytics views

5. End-to-end scenario
   - Create, resolve, advance time, expired resolve, still listed.

6. Lifecycle
   - Context manager starts and stops the expiry sweeper.
"""

from datetime import datetime, timedelta, UTC

import pytest
from beartype.roar import BeartypeCallHintParamViolation
from freezegun import freeze_time

from linkregistry import LinkRegistry, RegistryConfig
from linkregistry.dao.exceptions import ShortcodeNotFoundError, ShortcodeTakenError
from linkregistry.exceptions import (
    BadConfigurationError,
    InvalidShortcodeFormatError,
    InvalidUrlError,
    InvalidValidityPeriodError,
    LinkRegistryError,
    ShortURLExpiredError,
)
from linkregistry.models import MappingRecordView, RegistryStats


NOW = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# 1. Creation
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_create_short_url_returns_view(registry):
    view = registry.create_short_url('https://example.com/page')

    assert isinstance(view, MappingRecordView)
    assert len(view.shortcode) == 6
    assert view.original_url == 'https://example.com/page'
    assert view.short_url == f'https://short.test/{view.shortcode}'
    assert view.created_at == NOW
    assert view.expires_at == NOW + timedelta(minutes=30)
    assert view.click_count == 0
    assert view.is_expired is False


def test_create_short_url_uses_configured_default_validity():
    registry = LinkRegistry(config=RegistryConfig(default_validity_minutes=90))
    view = registry.create_short_url('https://example.com/page')
    assert view.expires_at - view.created_at == timedelta(minutes=90)


def test_custom_shortcode_rules(registry):
    assert registry.create_short_url('https://example.com/page', 'abc').shortcode == 'abc'

    with pytest.raises(InvalidShortcodeFormatError):
        registry.create_short_url('https://example.com/page', 'ab')

    with pytest.raises(ShortcodeTakenError):
        registry.create_short_url('https://example.com/other', 'abc')


@pytest.mark.parametrize(
    'args, error',
    [
        (('not a url',), InvalidUrlError),
        (('https://example.com', 'bad code!'), InvalidShortcodeFormatError),
        (('https://example.com', None, 0), InvalidValidityPeriodError),
    ],
)
def test_create_short_url_errors_carry_error_codes(registry, args, error):
    with pytest.raises(error) as exc_info:
        registry.create_short_url(*args)

    assert isinstance(exc_info.value, LinkRegistryError)
    assert exc_info.value.error_code.startswith('validation:')
    assert registry.list_all() == []


def test_create_short_url_logs_rejections(registry, caplog):
    with caplog.at_level('WARNING', logger='linkregistry.registry'):
        with pytest.raises(InvalidUrlError):
            registry.create_short_url('nope')

    [log] = [record for record in caplog.records if record.levelname == 'WARNING']
    assert log.errorCode == 'validation:invalid_url'


def test_create_short_url_with_invalid_type(registry):
    with pytest.raises(BeartypeCallHintParamViolation):
        registry.create_short_url('https://example.com', validity_minutes='30')


def test_registry_rejects_bad_configuration():
    with pytest.raises(BadConfigurationError):
        LinkRegistry(config=RegistryConfig(min_validity_minutes=10, max_validity_minutes=5))


# -------------------------------
# 2. Resolution
# -------------------------------


def test_resolve_round_trip(registry):
    view = registry.create_short_url('https://example.com/some/long/path?q=1')

    assert registry.resolve(view.shortcode) == 'https://example.com/some/long/path?q=1'
    assert registry.get_short_url(view.shortcode).original_url == 'https://example.com/some/long/path?q=1'


def test_resolve_counts_clicks(registry):
    view = registry.create_short_url('https://example.com/page', 'abc')

    for referrer in ('https://a.example', None, 'https://b.example'):
        registry.resolve('abc', referrer)

    current = registry.get_short_url('abc')
    assert current.click_count == 3
    assert [click.referrer for click in current.click_history] == ['https://a.example', 'Direct', 'https://b.example']
    # views are snapshots
    assert view.click_count == 0


def test_resolve_ttl_boundary(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry.create_short_url('https://example.com/page', 'abc', 5)

        frozen.move_to('2025-10-15 12:05:00')
        assert registry.resolve('abc') == 'https://example.com/page'

        frozen.move_to('2025-10-15 12:05:01')
        with pytest.raises(ShortURLExpiredError):
            registry.resolve('abc')


def test_resolve_missing_shortcode(registry):
    with pytest.raises(ShortcodeNotFoundError) as exc_info:
        registry.resolve('missing')
    assert exc_info.value.error_code == 'dao:shortcode_not_found'


def test_get_short_url_missing(registry):
    with pytest.raises(ShortcodeNotFoundError):
        registry.get_short_url('missing')


# -------------------------------
# 3. Deletion and slot reuse
# -------------------------------


def test_delete_then_recreate_same_shortcode(registry):
    registry.create_short_url('https://example.com/first', 'abc')
    registry.resolve('abc')

    registry.delete_short_url('abc')
    view = registry.create_short_url('https://example.com/second', 'abc')

    assert view.original_url == 'https://example.com/second'
    assert view.click_count == 0
    assert registry.resolve('abc') == 'https://example.com/second'


def test_delete_missing_shortcode(registry):
    with pytest.raises(ShortcodeNotFoundError):
        registry.delete_short_url('missing')


def test_deleted_shortcode_no_longer_resolves(registry):
    registry.create_short_url('https://example.com/page', 'abc')
    registry.delete_short_url('abc')

    with pytest.raises(ShortcodeNotFoundError):
        registry.resolve('abc')


# -------------------------------
# 4. Listing and analytics views
# -------------------------------


def test_list_all_newest_first(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for shortcode in ('one', 'two', 'three'):
            registry.create_short_url('https://example.com', shortcode)
            frozen.tick(timedelta(seconds=1))

        assert [view.shortcode for view in registry.list_all()] == ['three', 'two', 'one']


def test_stats(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry.create_short_url('https://example.com/a', 'aaa', 1)
        registry.create_short_url('https://example.com/b', 'bbb', 60)
        registry.resolve('aaa')
        registry.resolve('bbb')
        registry.resolve('bbb')
        frozen.tick(timedelta(minutes=2))

        assert registry.stats() == RegistryStats(total_urls=2, total_clicks=3, active_urls=1, expired_urls=1)


def test_top_performers(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for shortcode, clicks in (('aaa', 1), ('bbb', 3), ('ccc', 1), ('ddd', 0), ('eee', 2), ('fff', 4)):
            registry.create_short_url('https://example.com', shortcode)
            for _ in range(clicks):
                registry.resolve(shortcode)
            frozen.tick(timedelta(seconds=1))

        assert [view.shortcode for view in registry.top_performers()] == ['fff', 'bbb', 'eee', 'aaa', 'ccc']
        assert [view.shortcode for view in registry.top_performers(2)] == ['fff', 'bbb']
        assert [view.click_count for view in registry.top_performers(6)] == [4, 3, 2, 1, 1, 0]


def test_recent_activity(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry.create_short_url('https://example.com', 'abc')
        for i in range(4):
            registry.resolve('abc', f'ref-{i}')
            frozen.tick(timedelta(seconds=1))

    assert [click.referrer for click in registry.recent_activity('abc')] == ['ref-3', 'ref-2', 'ref-1']
    assert [click.referrer for click in registry.recent_activity('abc', 1)] == ['ref-3']


def test_recent_activity_missing_shortcode(registry):
    with pytest.raises(ShortcodeNotFoundError):
        registry.recent_activity('missing')


def test_recent_urls(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for shortcode in ('one', 'two', 'three', 'four'):
            registry.create_short_url('https://example.com', shortcode)
            frozen.tick(timedelta(seconds=1))

        assert [view.shortcode for view in registry.recent_urls()] == ['four', 'three', 'two']
        assert [view.shortcode for view in registry.recent_urls(1)] == ['four']


# -------------------------------
# 5. End-to-end scenario
# -------------------------------


def test_expiry_scenario(registry):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        view = registry.create_short_url('https://example.com/page', validity_minutes=1)

        assert registry.resolve(view.shortcode) == 'https://example.com/page'
        assert registry.get_short_url(view.shortcode).click_count == 1

        frozen.tick(timedelta(minutes=2))
        with pytest.raises(ShortURLExpiredError):
            registry.resolve(view.shortcode)

        [listed] = registry.list_all()
        assert listed.shortcode == view.shortcode
        assert listed.is_expired is True
        assert listed.click_count == 1
        assert registry.stats().expired_urls == 1


# -------------------------------
# 6. Lifecycle
# -------------------------------


def test_context_manager_runs_sweeper(config):
    with LinkRegistry(config=config) as registry:
        assert registry.sweeper.running
    assert not registry.sweeper.running


def test_close_is_idempotent(registry):
    registry.start_sweeper()
    registry.close()
    registry.close()
    assert not registry.sweeper.running
