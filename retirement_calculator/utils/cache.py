from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol


class CacheBackend(Protocol):
    """Key/value store with per-key TTL. Any method may raise on transport failure."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def delete(self, keys: Iterable[str]) -> int: ...

    def keys(self, prefix: str) -> List[str]: ...

    def exists(self, key: str) -> bool: ...


@dataclass
class CacheEntry:
    value: Any
    expires_at: float  # epoch seconds


class TTLCache:
    """
    Simple in-memory TTL cache.
    - Thread-safe: every operation holds the lock, so each get/set is atomic
    - Expired entries are dropped lazily when touched
    """

    def __init__(self, default_ttl_seconds: int = 86400, clock=time.time) -> None:
        self.default_ttl_seconds = int(default_ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._store: Dict[str, CacheEntry] = {}

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        # caller holds the lock
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._live_entry(key)
            return None if entry is None else entry.value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else int(ttl_seconds)
        expires_at = self._clock() + max(1, ttl)
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def delete(self, keys: Iterable[str]) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self._store.pop(key, None) is not None:
                    removed += 1
        return removed

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [key for key in list(self._store) if key.startswith(prefix) and self._live_entry(key)]

    def exists(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
