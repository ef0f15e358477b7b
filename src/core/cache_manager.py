"""Named registry of SmartCache instances.

One registry is built at process start and handed to whoever needs a cache,
so unrelated call sites share one cache per logical domain (products,
customers, orders, search). Creation is idempotent: the first `get_cache`
for a name wins and later configs for that name are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Dict, List, Mapping, Optional

from config import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_DEFAULT_TTL,
    CACHE_EVICTION_POLICY,
    CACHE_MAX_SIZE,
)
from core.cache import CacheConfig, CacheStats, SmartCache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CONFIG = CacheConfig(
    max_size=CACHE_MAX_SIZE,
    default_ttl=CACHE_DEFAULT_TTL,
    cleanup_interval=CACHE_CLEANUP_INTERVAL,
    eviction_policy=CACHE_EVICTION_POLICY,  # type: ignore[arg-type]
)

PRODUCTS = "products"
CUSTOMERS = "customers"
ORDERS = "orders"
SEARCH = "search"

# Products and searches stick by popularity; customers and orders by recency
DOMAIN_CACHE_CONFIGS: Dict[str, Dict[str, Any]] = {
    PRODUCTS: {"max_size": 500, "default_ttl": 10 * 60.0, "eviction_policy": "lfu"},
    CUSTOMERS: {"max_size": 1000, "default_ttl": 5 * 60.0, "eviction_policy": "lru"},
    ORDERS: {"max_size": 200, "default_ttl": 2 * 60.0, "eviction_policy": "lru"},
    SEARCH: {"max_size": 100, "default_ttl": 15 * 60.0, "eviction_policy": "lfu"},
}


class CacheManager:
    def __init__(self, *, default_config: Optional[CacheConfig] = None) -> None:
        self._default_config = default_config or DEFAULT_CACHE_CONFIG
        self._caches: Dict[str, SmartCache[Any]] = {}

    def get_cache(self, name: str, config: Optional[Mapping[str, Any]] = None) -> SmartCache[Any]:
        """Return the cache registered under `name`, creating it on first use.

        `config` holds CacheConfig field overrides merged over the registry
        default. It only applies on the first call for a name.
        """
        cache = self._caches.get(name)
        if cache is None:
            merged = replace(self._default_config, **dict(config or {}))
            cache = SmartCache(merged)
            self._caches[name] = cache
        elif config and self._differs(cache.config, config):
            logger.warning("Cache %r already exists; ignoring new config %r", name, dict(config))

        # Picks up the sweeper for caches created before the event loop started
        cache.start()
        return cache

    @staticmethod
    def _differs(current: CacheConfig, overrides: Mapping[str, Any]) -> bool:
        # Unknown keys count as a difference
        known = {f.name for f in fields(CacheConfig)}
        return any(k not in known or getattr(current, k) != v for k, v in overrides.items())

    def destroy_cache(self, name: str) -> bool:
        cache = self._caches.pop(name, None)
        if cache is None:
            return False
        cache.destroy()
        return True

    def get_all_stats(self) -> Dict[str, CacheStats]:
        return {name: cache.get_stats() for name, cache in self._caches.items()}

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    def names(self) -> List[str]:
        return list(self._caches.keys())

    def register_domain_caches(self) -> None:
        for name, overrides in DOMAIN_CACHE_CONFIGS.items():
            self.get_cache(name, overrides)

    def start(self) -> None:
        for cache in self._caches.values():
            cache.start()

    def shutdown(self) -> None:
        for name in list(self._caches):
            self.destroy_cache(name)

    # --- Domain caches ---

    @property
    def products(self) -> SmartCache[Any]:
        return self.get_cache(PRODUCTS, DOMAIN_CACHE_CONFIGS[PRODUCTS])

    @property
    def customers(self) -> SmartCache[Any]:
        return self.get_cache(CUSTOMERS, DOMAIN_CACHE_CONFIGS[CUSTOMERS])

    @property
    def orders(self) -> SmartCache[Any]:
        return self.get_cache(ORDERS, DOMAIN_CACHE_CONFIGS[ORDERS])

    @property
    def search(self) -> SmartCache[Any]:
        return self.get_cache(SEARCH, DOMAIN_CACHE_CONFIGS[SEARCH])
