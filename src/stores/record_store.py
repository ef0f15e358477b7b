"""Cached record readers over the hosted document database.

Reads go through CachedQuery (read-through, single-flight); writes call the
database mutation and then the matching invalidation recipe.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Literal, Mapping

from clients.convex_client import ConvexClient
from core.cache import SmartCache
from core.cached_query import CachedQuery
from core.errors import NotFoundError, ValidationError
from core.invalidation import CacheInvalidation
from core.keys import (
    customer_key,
    customer_list_key,
    customer_orders_key,
    order_key,
    order_list_key,
    product_key,
    product_list_key,
    search_key,
)

Domain = Literal["products", "customers", "orders"]
Record = Dict[str, Any]

ORDER_STATUSES = frozenset({"pending", "processing", "shipped", "delivered", "cancelled"})


def _clean_id(record_id: str) -> str:
    rid = (record_id or "").strip()
    if not rid:
        raise ValidationError("Missing record id")
    return rid


class RecordStore(ABC):
    table: str = ""
    key_for: Callable[[str], str] = staticmethod(lambda rid: rid)
    list_key: Callable[[], str] = staticmethod(lambda: "list:all")

    def __init__(
        self,
        *,
        client: ConvexClient,
        cache: SmartCache[Any],
        query: CachedQuery,
        invalidation: CacheInvalidation,
    ) -> None:
        self._client = client
        self._cache = cache
        self._query = query
        self._invalidation = invalidation

    async def get(self, record_id: str) -> Record:
        rid = _clean_id(record_id)

        async def load() -> Record:
            record = await self._client.query(f"{self.table}:get", {"id": rid})
            # Raising keeps a missing record out of the cache
            if record is None:
                raise NotFoundError(f"{self.table[:-1].capitalize()} not found: {rid}")
            return record

        return await self._query.get_with_cache(self.key_for(rid), self._cache, load)

    async def list(self) -> List[Record]:
        async def load() -> List[Record]:
            return list(await self._client.query(f"{self.table}:list") or [])

        return await self._query.get_with_cache(self.list_key(), self._cache, load)

    async def remove(self, record_id: str) -> Any:
        rid = _clean_id(record_id)
        related = await self._related_ids(rid)
        result = await self._client.mutation(f"{self.table}:remove", {"id": rid})
        self._invalidate(rid, related)
        return result

    async def _related_ids(self, record_id: str) -> Mapping[str, str]:
        return {}

    @abstractmethod
    def _invalidate(self, record_id: str, related: Mapping[str, str]) -> None:
        ...


class ProductStore(RecordStore):
    table = "products"
    key_for = staticmethod(product_key)
    list_key = staticmethod(product_list_key)

    def __init__(self, *, search_cache: SmartCache[Any], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._search_cache = search_cache

    async def update(self, product_id: str, fields: Mapping[str, Any]) -> Any:
        pid = _clean_id(product_id)
        result = await self._client.mutation("products:update", {**dict(fields), "id": pid})
        self._invalidate(pid, {})
        return result

    async def search_products(self, text: str) -> List[Record]:
        needle = " ".join((text or "").lower().split())
        if not needle:
            raise ValidationError("Missing search text")

        async def load() -> List[Record]:
            products = await self.list()
            return [
                p for p in products
                if needle in str(p.get("name", "")).lower()
                or needle in str(p.get("description", "")).lower()
            ]

        return await self._query.get_with_cache(search_key(needle), self._search_cache, load)

    async def warm_up(self) -> int:
        async def load_all() -> List[tuple[str, Record]]:
            products = await self._client.query("products:list") or []
            return [(product_key(p["_id"]), p) for p in products if p.get("_id")]

        return await self._query.warm_up_cache(self._cache, load_all)

    def _invalidate(self, record_id: str, related: Mapping[str, str]) -> None:
        self._invalidation.invalidate_product_caches(record_id)


class CustomerStore(RecordStore):
    table = "customers"
    key_for = staticmethod(customer_key)
    list_key = staticmethod(customer_list_key)

    async def update(self, customer_id: str, fields: Mapping[str, Any]) -> Any:
        cid = _clean_id(customer_id)
        result = await self._client.mutation("customers:update", {**dict(fields), "id": cid})
        self._invalidate(cid, {})
        return result

    def _invalidate(self, record_id: str, related: Mapping[str, str]) -> None:
        self._invalidation.invalidate_customer_caches(record_id)
        # The customer list view embeds the record too
        self._cache.delete(customer_list_key())


class OrderStore(RecordStore):
    table = "orders"
    key_for = staticmethod(order_key)
    list_key = staticmethod(order_list_key)

    async def list_for_customer(self, customer_id: str) -> List[Record]:
        cid = _clean_id(customer_id)

        async def load() -> List[Record]:
            return list(await self._client.query("orders:getByCustomer", {"customer_id": cid}) or [])

        return await self._query.get_with_cache(customer_orders_key(cid), self._cache, load)

    async def update_status(self, order_id: str, status: str) -> Any:
        oid = _clean_id(order_id)
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid order status: {status}")
        related = await self._related_ids(oid)
        result = await self._client.mutation("orders:updateStatus", {"id": oid, "status": status})
        self._invalidate(oid, related)
        return result

    async def _related_ids(self, record_id: str) -> Mapping[str, str]:
        order = await self.get(record_id)
        customer_id = order.get("customer_id")
        return {"customer_id": str(customer_id)} if customer_id else {}

    def _invalidate(self, record_id: str, related: Mapping[str, str]) -> None:
        self._invalidation.invalidate_order_caches(record_id, related.get("customer_id"))
        self._cache.delete(order_list_key())
