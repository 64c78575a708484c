# app/service_layer/cache.py
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable

from ..domain.types import CacheEntry, LookupResult

Clock = Callable[[], float]

MAX_ENTRIES = 512


@dataclass
class CacheStats:
    """Process-lifetime counters (debug only, not persisted)."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def snapshot(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "evictions": self.evictions}


class LookupCache:
    """
    Short-lived memo of complete lookups keyed by LookupQuery.cache_key().

    Entries are replaced, never mutated. Empty and transient results are
    cached too, so a caller retrying inside the TTL gets the same answer.

    Every put() sweeps expired entries and, past `max_entries`, drops the
    oldest, so distinct one-off queries cannot pile up in a long-lived process.
    """

    def __init__(
        self,
        *,
        ttl_s: float = 60.0,
        max_entries: int = MAX_ENTRIES,
        clock: Clock = time.monotonic,
    ) -> None:
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self.stats = CacheStats()

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self.ttl_s

    def get(self, key: str) -> LookupResult | None:
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None
        if self._expired(entry, self._clock()):
            self._entries.pop(key, None)
            self.stats.evictions += 1
            self.stats.misses += 1
            return None
        self.stats.hits += 1
        return entry.result

    def put(self, key: str, result: LookupResult) -> None:
        now = self._clock()
        self._entries.pop(key, None)
        self._sweep(now)
        while self._entries and len(self._entries) >= self.max_entries:
            # dicts keep insertion order and entries are never refreshed in place
            oldest = next(iter(self._entries))
            self._entries.pop(oldest)
            self.stats.evictions += 1
        self._entries[key] = CacheEntry(result=result, created_at=now)

    def _sweep(self, now: float) -> None:
        stale = [k for k, e in self._entries.items() if self._expired(e, now)]
        for k in stale:
            del self._entries[k]
        self.stats.evictions += len(stale)

    def lock_for(self, key: str) -> asyncio.Lock:
        """
        One lock per key: concurrent identical lookups wait for the first.
        Each call must be paired with release_lock(key).
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        return lock

    def release_lock(self, key: str) -> None:
        # The lock is dropped only once nobody holds or waits on it.
        users = self._lock_users.get(key, 0) - 1
        if users > 0:
            self._lock_users[key] = users
            return
        self._lock_users.pop(key, None)
        self._locks.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)
