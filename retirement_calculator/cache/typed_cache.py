"""Typed, namespaced view over a shared :class:`CacheBackend`."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Generic, Iterable, List, Optional, Type, TypeVar

from retirement_calculator.core.errors import cache_unavailable
from retirement_calculator.utils.cache import CacheBackend

logger = logging.getLogger(__name__)

V = TypeVar("V")

ALL_ENTRIES_SUFFIX = ":all"


class TypedCache(Generic[V]):
    """
    Stores values of one type under ``"<namespace>:<lowercased name>"``.

    The aggregate list lives under ``"<namespace>::all"``; its presence means
    the namespace was fully populated. It expires no later than the entries
    written with it. Backend failures are re-raised as
    ``CACHE_UNAVAILABLE`` errors.
    """

    def __init__(self, backend: CacheBackend, namespace: str, value_type: Type[V], ttl: timedelta) -> None:
        self._backend = backend
        self.namespace = namespace
        self.value_type = value_type
        self.ttl = ttl

    @property
    def ttl_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    @property
    def sentinel_ttl_seconds(self) -> int:
        # never outlives the entries written before it
        return max(1, self.ttl_seconds - 1)

    @property
    def all_key(self) -> str:
        return f"{self.namespace}:{ALL_ENTRIES_SUFFIX}"

    def key_for(self, name: str) -> str:
        return f"{self.namespace}:{name.strip().lower()}"

    def _call(self, description: str, operation: Callable[..., Any], *args: Any) -> Any:
        try:
            return operation(*args)
        except Exception as exc:
            logger.error("Cache backend failure while %s: %s", description, exc, exc_info=True)
            raise cache_unavailable(f"Failed to {description}", exc) from exc

    def get(self, name: str) -> Optional[V]:
        key = self.key_for(name)
        value = self._call(f"read {key} from cache", self._backend.get, key)
        if value is None:
            return None
        if not isinstance(value, self.value_type):
            logger.warning("Ignoring cached %s of unexpected type %s", key, type(value).__name__)
            return None
        return value

    def put(self, name: str, value: V) -> None:
        key = self.key_for(name)
        if key == self.all_key:
            logger.warning("Not caching %r, its key is reserved for the %s aggregate", name, self.namespace)
            return
        self._call(f"write {key} to cache", self._backend.set, key, value, self.ttl_seconds)

    def get_all(self) -> Optional[List[V]]:
        values = self._call(f"read {self.all_key} from cache", self._backend.get, self.all_key)
        if not isinstance(values, list):
            return None
        return [value for value in values if isinstance(value, self.value_type)]

    def put_all(self, entries: Iterable[tuple]) -> List[V]:
        """Write every ``(name, value)`` pair, then the aggregate list last."""
        values: List[V] = []
        for name, value in entries:
            self.put(name, value)
            values.append(value)
        self._call(
            f"write {self.all_key} to cache",
            self._backend.set,
            self.all_key,
            list(values),
            self.sentinel_ttl_seconds,
        )
        return values

    def clear(self) -> int:
        keys = self._call(f"list {self.namespace} cache keys", self._backend.keys, f"{self.namespace}:")
        if not keys:
            return 0
        # sentinel first so the namespace never looks populated while half empty
        ordered = sorted(keys, key=lambda key: key != self.all_key)
        removed = self._call(f"delete {self.namespace} cache keys", self._backend.delete, ordered)
        logger.debug("Deleted %s existing %s cache entries", removed, self.namespace)
        return removed

    def is_populated(self) -> bool:
        return bool(self._call(f"check {self.all_key}", self._backend.exists, self.all_key))
