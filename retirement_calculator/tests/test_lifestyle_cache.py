from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from retirement_calculator.cache.lifestyle_cache import LifestyleCache
from retirement_calculator.core.errors import ErrorKind, RetirementCalculatorError
from retirement_calculator.domain.models import LifestyleProfile
from retirement_calculator.utils.cache import TTLCache

from retirement_calculator.tests.fakes import (
    SIMPLE,
    BrokenStore,
    CountingStore,
    FailingBackend,
    FakeClock,
    RecordingBackend,
)


def test_first_lookup_reads_store_once_then_serves_from_cache():
    store = CountingStore()
    backend = RecordingBackend()
    cache = LifestyleCache(backend, store)

    first = cache.get_deposit("Simple")
    assert first.monthly_deposit == Decimal("2000.00")
    assert store.find_by_name_calls == 1
    assert backend.writes == ["deposit:simple"]

    second = cache.get_deposit("SIMPLE")
    assert second == first
    assert store.find_by_name_calls == 1
    assert backend.writes == ["deposit:simple"]


def test_unknown_lifestyle_is_not_cached():
    store = CountingStore()
    backend = RecordingBackend()
    cache = LifestyleCache(backend, store)

    assert cache.get_deposit("yacht") is None
    assert cache.get_deposit("yacht") is None
    assert store.find_by_name_calls == 2
    assert backend.writes == []


def test_initialize_writes_every_entry_before_the_sentinel():
    backend = RecordingBackend()
    cache = LifestyleCache(backend, CountingStore())

    assert cache.initialize_cache() == 2
    assert backend.writes == ["deposit:simple", "deposit:fancy", "deposit::all"]
    assert cache.is_healthy()


def test_initialize_with_empty_store_is_a_logged_no_op():
    backend = RecordingBackend()
    cache = LifestyleCache(backend, CountingStore(profiles=[]))

    assert cache.initialize_cache() == 0
    assert backend.writes == []
    assert not cache.is_healthy()


def test_initialized_cache_does_not_touch_the_store():
    store = CountingStore()
    cache = LifestyleCache(TTLCache(), store)
    cache.initialize_cache()

    assert cache.get_deposit("fancy").monthly_deposit == Decimal("5000.00")
    assert store.find_by_name_calls == 0


def test_get_all_deposits_populates_cache_on_miss():
    store = CountingStore()
    backend = RecordingBackend()
    cache = LifestyleCache(backend, store)

    profiles = cache.get_all_deposits()
    assert [profile.lifestyle_type for profile in profiles] == ["simple", "fancy"]
    assert backend.writes[-1] == "deposit::all"
    assert cache.get_all_deposits() == profiles
    assert store.find_all_calls == 1


def test_refresh_is_idempotent_for_known_names():
    store = CountingStore()
    cache = LifestyleCache(TTLCache(), store)
    cache.initialize_cache()
    before = cache.get_deposit("simple")

    assert cache.refresh_cache() == 2
    assert cache.get_deposit("simple") == before
    assert cache.is_healthy()


def test_refresh_picks_up_store_changes():
    store = CountingStore()
    cache = LifestyleCache(TTLCache(), store)
    cache.initialize_cache()

    store.profiles = [LifestyleProfile("simple", Decimal("2100.00"))]
    cache.refresh_cache()

    assert cache.get_deposit("simple").monthly_deposit == Decimal("2100.00")
    assert [profile.lifestyle_type for profile in cache.get_all_deposits()] == ["simple"]
    assert cache.get_deposit("fancy") is None
    assert store.find_by_name_calls == 1


def test_entries_expire_after_ttl():
    clock = FakeClock()
    store = CountingStore()
    cache = LifestyleCache(TTLCache(clock=clock), store, ttl=timedelta(hours=24))
    cache.initialize_cache()

    clock.advance(timedelta(hours=24).total_seconds() + 1)

    assert not cache.is_healthy()
    assert cache.get_deposit("simple") is not None
    assert store.find_by_name_calls == 1


def test_backend_failure_surfaces_as_cache_unavailable():
    cache = LifestyleCache(FailingBackend(), CountingStore())

    with pytest.raises(RetirementCalculatorError) as exc_info:
        cache.get_deposit("simple")
    assert exc_info.value.kind is ErrorKind.CACHE_UNAVAILABLE
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_store_failure_surfaces_as_cache_unavailable():
    cache = LifestyleCache(TTLCache(), BrokenStore())

    with pytest.raises(RetirementCalculatorError) as exc_info:
        cache.get_deposit("simple")
    assert exc_info.value.kind is ErrorKind.CACHE_UNAVAILABLE

    with pytest.raises(RetirementCalculatorError) as exc_info:
        cache.initialize_cache()
    assert exc_info.value.kind is ErrorKind.CACHE_UNAVAILABLE


def test_health_check_never_raises():
    cache = LifestyleCache(FailingBackend(), CountingStore())
    assert cache.is_healthy() is False


def test_lifestyle_named_all_does_not_clobber_the_aggregate():
    named_all = LifestyleProfile("all", Decimal("100.00"))
    store = CountingStore([SIMPLE, named_all])
    cache = LifestyleCache(TTLCache(), store)
    cache.initialize_cache()

    assert cache.get_deposit("all") == named_all
    assert store.find_by_name_calls == 0
    assert [profile.lifestyle_type for profile in cache.get_all_deposits()] == ["simple", "all"]
    assert cache.is_healthy()


def test_name_mapping_onto_the_aggregate_key_is_never_cached():
    odd = LifestyleProfile(":all", Decimal("100.00"))
    store = CountingStore([SIMPLE, odd])
    backend = RecordingBackend()
    cache = LifestyleCache(backend, store)
    cache.initialize_cache()

    assert cache.get_deposit(":all") == odd
    assert backend.writes == ["deposit:simple", "deposit::all"]
    assert [profile.lifestyle_type for profile in cache.get_all_deposits()] == ["simple", ":all"]


def test_non_list_aggregate_is_treated_as_a_miss():
    backend = TTLCache()
    store = CountingStore()
    cache = LifestyleCache(backend, store)
    backend.set("deposit::all", SIMPLE, 60)

    assert [profile.lifestyle_type for profile in cache.get_all_deposits()] == ["simple", "fancy"]
    assert store.find_all_calls == 1
