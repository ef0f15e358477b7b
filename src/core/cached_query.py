"""Cache-aside helpers: read-through with single-flight, pattern invalidation, warm-up.

Concurrent misses for the same (cache, key) share one in-flight load; the
first caller starts it and the others await the same task. A failing loader
propagates to every waiter and nothing is cached. A load that started before
a delete/clear on its cache is stale: later callers start a fresh load and
the stale one never writes back.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple, TypeVar

from core.cache import SmartCache

T = TypeVar("T")

Loader = Callable[[], Awaitable[T]]
BulkLoader = Callable[[], Awaitable[Iterable[Tuple[str, T]]]]

logger = logging.getLogger(__name__)

_MISSING = object()

FlightKey = Tuple[SmartCache[Any], str]


@dataclass(frozen=True)
class _Flight:
    task: "asyncio.Task[Any]"
    generation: int


def _consume_exception(task: "asyncio.Task[Any]") -> None:
    # Waiters may all be cancelled; keep a failed load from logging as unretrieved
    if not task.cancelled():
        task.exception()


class CachedQuery:
    def __init__(self) -> None:
        self._inflight: Dict[FlightKey, _Flight] = {}

    async def get_with_cache(
        self,
        key: str,
        cache: SmartCache[T],
        loader: Loader[T],
        ttl: Optional[float] = None,
    ) -> T:
        cached = cache.get(key, _MISSING)  # type: ignore[arg-type]
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]

        flight_key = (cache, key)
        flight = self._inflight.get(flight_key)
        if flight is None or flight.generation != cache.generation:
            generation = cache.generation
            task = asyncio.ensure_future(self._load(flight_key, cache, loader, ttl, generation))
            task.add_done_callback(_consume_exception)
            flight = _Flight(task=task, generation=generation)
            self._inflight[flight_key] = flight

        # Shield so one cancelled caller does not abort the load for the rest
        return await asyncio.shield(flight.task)

    def invalidate_pattern(self, cache: SmartCache[Any], pattern: str) -> int:
        """Delete every key containing `pattern` as a literal substring.

        Loads in flight for a matching key are marked stale as well, even
        when the key is not cached yet.
        """
        removed = 0
        for key in cache.keys():
            if pattern in key and cache.delete(key):
                removed += 1
        for flight_cache, key in list(self._inflight):
            if flight_cache is cache and pattern in key:
                cache.delete(key)
        return removed

    async def warm_up_cache(
        self,
        cache: SmartCache[T],
        bulk_loader: BulkLoader[T],
        ttl: Optional[float] = None,
    ) -> int:
        """Best-effort bulk load; loader failures are logged, never raised."""
        try:
            items = list(await bulk_loader())
        except Exception:
            logger.exception("Cache warm-up failed")
            return 0

        for key, data in items:
            cache.set(key, data, ttl)
        logger.info("Cache warmed up with %d entries", len(items))
        return len(items)

    def inflight_count(self) -> int:
        return len(self._inflight)

    async def _load(
        self,
        flight_key: FlightKey,
        cache: SmartCache[T],
        loader: Loader[T],
        ttl: Optional[float],
        generation: int,
    ) -> T:
        try:
            value = await loader()
            if cache.generation == generation:
                cache.set(flight_key[1], value, ttl)
            return value
        finally:
            flight = self._inflight.get(flight_key)
            # A newer flight may have replaced this one
            if flight is not None and flight.task is asyncio.current_task():
                del self._inflight[flight_key]
