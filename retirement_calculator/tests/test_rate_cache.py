from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from retirement_calculator.cache.rate_cache import InterestRateCache
from retirement_calculator.core.errors import ErrorKind, RetirementCalculatorError
from retirement_calculator.domain.models import RateEntry
from retirement_calculator.store.rate_table import RateTableError
from retirement_calculator.utils.cache import TTLCache

from retirement_calculator.tests.fakes import CountingRateLoader, FailingBackend, FakeClock, RecordingBackend


def test_initialize_loads_table_once_and_writes_sentinel_last():
    loader = CountingRateLoader()
    backend = RecordingBackend()
    cache = InterestRateCache(backend, loader)

    assert cache.initialize_cache() == 2
    assert loader.calls == 1
    assert backend.writes == ["rate:simple", "rate:fancy", "rate::all"]
    assert cache.is_healthy()


def test_lookup_is_case_insensitive():
    cache = InterestRateCache(TTLCache(), CountingRateLoader())
    cache.initialize_cache()

    assert cache.get_rate("FANCY").interest_rate == Decimal("7.0")
    assert cache.get_rate(" simple ").interest_rate == Decimal("5.0")


def test_unknown_lifestyle_does_not_reload_populated_table():
    loader = CountingRateLoader()
    cache = InterestRateCache(TTLCache(), loader)
    cache.initialize_cache()

    assert cache.get_rate("modest") is None
    assert cache.get_rate("modest") is None
    assert loader.calls == 1


def test_lifestyle_named_like_the_sentinel_is_unknown():
    cache = InterestRateCache(TTLCache(), CountingRateLoader())
    cache.initialize_cache()

    assert cache.get_rate("all") is None


def test_empty_cache_is_loaded_on_first_lookup():
    loader = CountingRateLoader()
    cache = InterestRateCache(TTLCache(), loader)

    assert cache.get_rate("simple").interest_rate == Decimal("5.0")
    assert loader.calls == 1
    assert cache.is_healthy()


def test_expired_table_is_reloaded():
    clock = FakeClock()
    loader = CountingRateLoader()
    cache = InterestRateCache(TTLCache(clock=clock), loader, ttl=timedelta(minutes=5))
    cache.initialize_cache()

    clock.advance(301)
    assert not cache.is_healthy()
    assert cache.get_rate("fancy").interest_rate == Decimal("7.0")
    assert loader.calls == 2


def test_refresh_replaces_the_table():
    loader = CountingRateLoader()
    cache = InterestRateCache(TTLCache(), loader)
    cache.initialize_cache()

    loader.entries = [RateEntry("simple", Decimal("4.5"))]
    assert cache.refresh_cache() == 1
    assert cache.get_rate("simple").interest_rate == Decimal("4.5")
    assert cache.get_rate("fancy") is None


def test_empty_table_leaves_cache_unpopulated():
    cache = InterestRateCache(TTLCache(), CountingRateLoader(entries=[]))
    assert cache.initialize_cache() == 0
    assert not cache.is_healthy()


def test_unreadable_table_surfaces_as_cache_unavailable():
    def broken_loader():
        raise RateTableError("rate table not found")

    cache = InterestRateCache(TTLCache(), broken_loader)
    with pytest.raises(RetirementCalculatorError) as exc_info:
        cache.get_rate("simple")
    assert exc_info.value.kind is ErrorKind.CACHE_UNAVAILABLE
    assert isinstance(exc_info.value.__cause__, RateTableError)


def test_backend_failure_is_unhealthy_not_fatal():
    cache = InterestRateCache(FailingBackend(), CountingRateLoader())
    assert cache.is_healthy() is False
    with pytest.raises(RetirementCalculatorError) as exc_info:
        cache.get_rate("simple")
    assert exc_info.value.kind is ErrorKind.CACHE_UNAVAILABLE


def test_sentinel_expires_no_later_than_the_entries():
    clock = FakeClock()
    loader = CountingRateLoader()
    backend = TTLCache(clock=clock)
    cache = InterestRateCache(backend, loader, ttl=timedelta(hours=24))
    cache.initialize_cache()

    clock.advance(timedelta(hours=24).total_seconds() - 0.5)
    assert backend.exists("rate:simple")
    assert not cache.is_healthy()

    assert cache.get_rate("modest") is None
    assert loader.calls == 2
    assert cache.is_healthy()


def test_evicted_entry_is_restored_from_the_cached_table():
    loader = CountingRateLoader()
    backend = TTLCache()
    cache = InterestRateCache(backend, loader)
    cache.initialize_cache()

    backend.delete(["rate:simple"])

    assert cache.get_rate("simple").interest_rate == Decimal("5.0")
    assert backend.exists("rate:simple")
    assert loader.calls == 1
