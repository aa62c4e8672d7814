"""In-process implementation of ExpiringCache.

This is the default cache backend. One instance is built by the API
lifespan and handed to every consumer, so a process holds exactly one
store no matter how many components share it.
"""

import math
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

from comment_generator.entities import CacheEntryEntity


def _time_to_use(key: str, entry: CacheEntryEntity, now: float) -> float:
    return entry.expires_at if entry.expires_at is not None else math.inf


class InMemoryExpiringCache:
    """TLRUCache-backed cache with a per-entry expiry.

    This class satisfies the ExpiringCache protocol through structural
    typing - no explicit inheritance needed.

    Expired entries are dropped on the next read or write; there is no
    background sweep and no size bound. cachetools caches are not
    thread-safe, so every access holds the lock.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize the cache.

        Args:
            clock: Source of the current Unix time (injectable for tests).
        """
        self._clock = clock
        self._store: TLRUCache[str, CacheEntryEntity] = TLRUCache(
            maxsize=math.inf, ttu=_time_to_use, timer=clock
        )
        self._lock = threading.Lock()

    @classmethod
    def create(cls) -> "InMemoryExpiringCache":
        """Factory method to create InMemoryExpiringCache with the wall clock."""
        return cls()

    def get(self, key: str) -> Any | None:
        """Return the value for key, evicting expired entries first."""
        with self._lock:
            self._store.expire()
            entry = self._store.get(key)
            return entry.value if entry is not None else None

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = None,
        expires_at: float | None = None,
    ) -> None:
        """Store value under key with an optional relative or absolute expiry."""
        if ttl:
            expires_at = self._clock() + ttl
        with self._lock:
            # An entry already past its expiry is not stored
            self._store.pop(key, None)
            self._store[key] = CacheEntryEntity(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def health_check(self) -> bool:
        return True

    def __len__(self) -> int:
        """Number of stored entries, expired ones included until the next access."""
        with self._lock:
            return len(self._store)
