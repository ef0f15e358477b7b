"""Invalidation fan-out: which cache keys a write on one entity makes stale.

Steps across caches are best-effort and not atomic; a stale leftover is
bounded by the entry TTL.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.cache_manager import CacheManager
from core.cached_query import CachedQuery
from core.keys import customer_key, customer_orders_pattern, order_key, product_key

logger = logging.getLogger(__name__)


class CacheInvalidation:
    def __init__(self, manager: CacheManager, query: CachedQuery) -> None:
        self._manager = manager
        self._query = query

    def invalidate_product_caches(self, product_id: str) -> None:
        self._manager.products.delete(product_key(product_id))
        # Search results and list views may embed the product
        self._query.invalidate_pattern(self._manager.search, "product")
        self._query.invalidate_pattern(self._manager.products, "list")

    def invalidate_customer_caches(self, customer_id: str) -> None:
        self._manager.customers.delete(customer_key(customer_id))
        self._query.invalidate_pattern(self._manager.orders, customer_orders_pattern(customer_id))

    def invalidate_order_caches(self, order_id: str, customer_id: Optional[str] = None) -> None:
        self._manager.orders.delete(order_key(order_id))
        if customer_id:
            self._query.invalidate_pattern(self._manager.orders, customer_orders_pattern(customer_id))

    def invalidate_all(self) -> None:
        self._manager.clear_all()
        logger.info("All caches invalidated")
