from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, List, Optional

from retirement_calculator.cache.typed_cache import TypedCache
from retirement_calculator.core.errors import RetirementCalculatorError, cache_unavailable
from retirement_calculator.domain.models import RateEntry
from retirement_calculator.utils.cache import CacheBackend

logger = logging.getLogger(__name__)

RATE_NAMESPACE = "rate"
DEFAULT_TTL = timedelta(hours=24)

RateLoader = Callable[[], List[RateEntry]]


class InterestRateCache:
    """
    Interest rates by lifestyle, loaded wholesale from the reference table.

    A per-key miss while the table is cached is answered from the cached
    table, so a name absent there is unknown. The table is only reloaded
    when the whole namespace has expired or was never populated.
    """

    def __init__(self, backend: CacheBackend, loader: RateLoader, ttl: timedelta = DEFAULT_TTL) -> None:
        self._cache: TypedCache[RateEntry] = TypedCache(backend, RATE_NAMESPACE, RateEntry, ttl)
        self._loader = loader

    def get_rate(self, lifestyle_type: str) -> Optional[RateEntry]:
        logger.debug("Retrieving interest rate for lifestyle type: %s", lifestyle_type)
        cached = self._cache.get(lifestyle_type)
        if cached is not None:
            logger.debug("Cache hit for interest rate, found value: %s", cached.interest_rate)
            return cached

        if self._cache.is_populated():
            entry = self._from_cached_table(lifestyle_type)
            if entry is None:
                logger.debug("Cache miss for interest rate of unknown lifestyle type: %s", lifestyle_type)
            return entry

        logger.info("Interest rate cache is empty, reloading the rate table")
        self.initialize_cache()
        return self._cache.get(lifestyle_type)

    def initialize_cache(self) -> int:
        logger.info("Initializing interest rate cache from the rate table")
        entries = self._load("initialize interest rate cache")
        if not entries:
            logger.warning("No interest rate data found in the rate table for cache initialization")
            return 0
        self._cache.put_all((entry.lifestyle_type, entry) for entry in entries)
        logger.info("Successfully initialized interest rate cache with %s records", len(entries))
        return len(entries)

    def refresh_cache(self) -> int:
        logger.info("Refreshing interest rate cache")
        self._cache.clear()
        loaded = self.initialize_cache()
        logger.info("Interest rate cache refresh completed")
        return loaded

    def is_healthy(self) -> bool:
        try:
            return self._cache.is_populated()
        except RetirementCalculatorError as exc:
            logger.error("Interest rate cache health check failed: %s", exc)
            return False

    def _from_cached_table(self, lifestyle_type: str) -> Optional[RateEntry]:
        key = lifestyle_type.strip().lower()
        for entry in self._cache.get_all() or []:
            if entry.key == key:
                logger.debug("Restoring evicted interest rate entry for: %s", lifestyle_type)
                self._cache.put(entry.lifestyle_type, entry)
                return entry
        return None

    def _load(self, description: str) -> List[RateEntry]:
        try:
            return self._loader()
        except Exception as exc:
            logger.error("Rate table failure while trying to %s: %s", description, exc, exc_info=True)
            raise cache_unavailable(f"Failed to {description}", exc) from exc
