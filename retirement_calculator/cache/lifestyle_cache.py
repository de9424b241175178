from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional, Protocol

from retirement_calculator.cache.typed_cache import TypedCache
from retirement_calculator.core.errors import RetirementCalculatorError, cache_unavailable
from retirement_calculator.domain.models import LifestyleProfile
from retirement_calculator.utils.cache import CacheBackend

logger = logging.getLogger(__name__)

DEPOSIT_NAMESPACE = "deposit"
DEFAULT_TTL = timedelta(hours=24)


class LifestyleSource(Protocol):
    def find_all(self) -> List[LifestyleProfile]: ...

    def find_by_name_ignore_case(self, name: str) -> Optional[LifestyleProfile]: ...


class LifestyleCache:
    """Cache-aside access to lifestyle deposits, falling back to the lifestyle store per key."""

    def __init__(self, backend: CacheBackend, store: LifestyleSource, ttl: timedelta = DEFAULT_TTL) -> None:
        self._cache: TypedCache[LifestyleProfile] = TypedCache(backend, DEPOSIT_NAMESPACE, LifestyleProfile, ttl)
        self._store = store

    def get_deposit(self, lifestyle_type: str) -> Optional[LifestyleProfile]:
        logger.debug("Retrieving lifestyle data from cache for type: %s", lifestyle_type)
        cached = self._cache.get(lifestyle_type)
        if cached is not None:
            logger.debug("Cache hit for lifestyle type: %s", lifestyle_type)
            return cached

        logger.debug("Cache miss for lifestyle type: %s, querying the lifestyle store", lifestyle_type)
        profile = self._query_store(
            "retrieve lifestyle data", self._store.find_by_name_ignore_case, lifestyle_type
        )
        if profile is None:
            return None
        self._cache.put(lifestyle_type, profile)
        logger.debug("Added lifestyle to cache: %s", lifestyle_type)
        return profile

    def get_all_deposits(self) -> List[LifestyleProfile]:
        cached = self._cache.get_all()
        if cached:
            logger.debug("Cache hit for all lifestyles, found %s items", len(cached))
            return cached

        logger.debug("Cache miss for all lifestyles, querying the lifestyle store")
        profiles = self._query_store("retrieve all lifestyle data", self._store.find_all)
        if not profiles:
            return []
        return self._cache.put_all((profile.lifestyle_type, profile) for profile in profiles)

    def initialize_cache(self) -> int:
        logger.info("Initializing lifestyle cache from the lifestyle store")
        profiles = self._query_store("initialize lifestyle cache", self._store.find_all)
        if not profiles:
            logger.warning("No lifestyle data found in the store for cache initialization")
            return 0
        self._cache.put_all((profile.lifestyle_type, profile) for profile in profiles)
        logger.info("Successfully initialized lifestyle cache with %s records", len(profiles))
        return len(profiles)

    def refresh_cache(self) -> int:
        logger.info("Refreshing lifestyle cache")
        self._cache.clear()
        loaded = self.initialize_cache()
        logger.info("Lifestyle cache refresh completed")
        return loaded

    def is_healthy(self) -> bool:
        try:
            return self._cache.is_populated()
        except RetirementCalculatorError as exc:
            logger.error("Lifestyle cache health check failed: %s", exc)
            return False

    def _query_store(self, description: str, operation, *args):
        try:
            return operation(*args)
        except Exception as exc:
            logger.error("Lifestyle store failure while trying to %s: %s", description, exc, exc_info=True)
            raise cache_unavailable(f"Failed to {description}", exc) from exc
