"""Factory for selecting the cached record store of a domain.

Exposes get_record_store which wires a store to its domain cache.
"""

from __future__ import annotations

from clients.convex_client import ConvexClient
from core.cache_manager import CacheManager
from core.cached_query import CachedQuery
from core.errors import ValidationError
from core.invalidation import CacheInvalidation
from stores.record_store import CustomerStore, Domain, OrderStore, ProductStore, RecordStore


def get_record_store(
    domain: Domain,
    *,
    client: ConvexClient,
    manager: CacheManager,
    query: CachedQuery,
    invalidation: CacheInvalidation,
) -> RecordStore:
    shared = {"client": client, "query": query, "invalidation": invalidation}

    if domain == "products":
        return ProductStore(cache=manager.products, search_cache=manager.search, **shared)
    if domain == "customers":
        return CustomerStore(cache=manager.customers, **shared)
    if domain == "orders":
        return OrderStore(cache=manager.orders, **shared)

    raise ValidationError(f"Unknown domain: {domain}")
