"""Cache-aside lookups for lifestyle deposits and interest rates."""

from retirement_calculator.cache.lifestyle_cache import LifestyleCache
from retirement_calculator.cache.rate_cache import InterestRateCache
from retirement_calculator.cache.typed_cache import TypedCache

__all__ = ["InterestRateCache", "LifestyleCache", "TypedCache"]
