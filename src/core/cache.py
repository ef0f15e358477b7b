"""In-memory TTL cache with pluggable eviction (lru / lfu / ttl).

Entries carry a monotonic creation timestamp, a per-entry TTL and access
bookkeeping. Expired entries are purged lazily on get/has and by a periodic
asyncio sweep that lives exactly as long as the cache.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

T = TypeVar("T")

EvictionPolicy = Literal["lru", "lfu", "ttl"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float  # time.monotonic()
    ttl: float
    access_count: int = 1
    last_accessed: float = 0.0

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl

    @property
    def expires_at(self) -> float:
        return self.timestamp + self.ttl


@dataclass(frozen=True)
class CacheConfig:
    """Immutable per-cache settings. Durations are seconds."""

    max_size: int = 1000
    default_ttl: float = 300.0
    cleanup_interval: float = 60.0
    eviction_policy: EvictionPolicy = "lru"


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    total_size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return (self.hits / total) * 100 if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["hit_rate"] = self.hit_rate
        return out


class SmartCache(Generic[T]):
    """Bounded key/value store with TTL expiry and configurable eviction.

    None of the operations raise for normal usage: misses, a full cache and
    stale keys are reported through return values.
    """

    def __init__(self, config: Optional[CacheConfig] = None) -> None:
        self._config = config or CacheConfig()
        self._store: Dict[str, CacheEntry[T]] = {}
        self._stats = CacheStats()
        self._cleanup_task: Optional[asyncio.Task[None]] = None
        self._destroyed = False
        self._generation = 0
        self.start()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def generation(self) -> int:
        """Bumped by every delete/clear so in-flight loads can tell they went stale."""
        return self._generation

    @property
    def cleanup_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def get(self, key: str, default: Optional[T] = None) -> Optional[T]:
        entry = self._store.get(key)
        if entry is None:
            self._stats.misses += 1
            return default

        now = time.monotonic()
        if entry.is_expired(now):
            self._remove_expired(key)
            self._stats.misses += 1
            return default

        entry.access_count += 1
        entry.last_accessed = now
        self._stats.hits += 1
        return entry.data

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        now = time.monotonic()

        # Overwriting an existing key never grows the store, so it never evicts
        if len(self._store) >= self._config.max_size and key not in self._store:
            self._evict_one()

        self._store[key] = CacheEntry(
            data=value,
            timestamp=now,
            ttl=ttl or self._config.default_ttl,
            access_count=1,
            last_accessed=now,
        )
        self._stats.sets += 1
        self._stats.total_size = len(self._store)

    def delete(self, key: str) -> bool:
        # Bumped even when the key is absent: a load for it may be in flight
        self._generation += 1
        if self._store.pop(key, None) is None:
            return False
        self._stats.deletes += 1
        self._stats.total_size = len(self._store)
        return True

    def has(self, key: str) -> bool:
        # Purges stale keys but leaves hit/miss counters alone
        entry = self._store.get(key)
        if entry is None:
            return False
        if entry.is_expired(time.monotonic()):
            self._remove_expired(key)
            return False
        return True

    def clear(self) -> None:
        self._generation += 1
        self._store.clear()
        self._stats.total_size = 0

    def get_stats(self) -> CacheStats:
        return replace(self._stats)

    def keys(self) -> List[str]:
        return list(self._store.keys())

    def size(self) -> int:
        return len(self._store)

    def cleanup(self) -> int:
        """Remove every expired entry; returns how many were removed."""
        now = time.monotonic()
        expired = [k for k, e in self._store.items() if e.is_expired(now)]
        for key in expired:
            self._remove_expired(key)
        self._stats.total_size = len(self._store)
        if expired:
            logger.debug("Cache sweep removed %d expired entries", len(expired))
        return len(expired)

    def start(self) -> None:
        """Schedule the periodic sweep if an event loop is running.

        Idempotent. Without a running loop this is a no-op and the sweep is
        scheduled by the next call made from inside a loop.
        """
        if self._destroyed or self.cleanup_running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._cleanup_task = loop.create_task(self._cleanup_loop())

    def destroy(self) -> None:
        self._destroyed = True
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            self._cleanup_task = None
        self.clear()

    async def _cleanup_loop(self) -> None:
        interval = max(0.001, float(self._config.cleanup_interval))
        while True:
            await asyncio.sleep(interval)
            self.cleanup()

    def _remove_expired(self, key: str) -> None:
        # Whichever path finds a stale entry first counts the eviction
        if self._store.pop(key, None) is not None:
            self._stats.evictions += 1
            self._stats.total_size = len(self._store)

    def _evict_one(self) -> None:
        if not self._store:
            return

        policy = self._config.eviction_policy
        items = self._store.items()

        # min() keeps the first candidate on ties (insertion order)
        if policy == "lru":
            victim = min(items, key=lambda kv: kv[1].last_accessed)[0]
        elif policy == "lfu":
            victim = min(items, key=lambda kv: kv[1].access_count)[0]
        elif policy == "ttl":
            victim = min(items, key=lambda kv: kv[1].expires_at)[0]
        else:
            victim = next(iter(self._store))

        del self._store[victim]
        self._stats.evictions += 1
        self._stats.total_size = len(self._store)
