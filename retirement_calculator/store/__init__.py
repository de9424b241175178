"""Backing sources for the caches: the lifestyle table and the rate reference table."""

from retirement_calculator.store.lifestyle_store import LifestyleStore
from retirement_calculator.store.rate_table import RateTableError, load_rate_table

__all__ = ["LifestyleStore", "RateTableError", "load_rate_table"]
