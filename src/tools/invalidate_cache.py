"""MCP tools to evict stale entries after out-of-band writes and to pre-load caches."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from core.invalidation import CacheInvalidation
from stores.record_store import ProductStore

Entity = Literal["product", "customer", "order", "all"]


def register(
    mcp: FastMCP,
    *,
    invalidation: CacheInvalidation,
    product_store: ProductStore,
) -> None:
    @mcp.tool(name="invalidate_cache")
    async def invalidate_cache(
        entity: Entity,
        entity_id: str = "",
        customer_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Invalidate cache entries made stale by a write to an entity.

        Params:
          - entity: "product", "customer", "order" or "all".
          - entity_id: id of the written record (required unless entity is "all").
          - customer_id: for orders, also drop that customer's order listings.
        """
        if entity == "all":
            invalidation.invalidate_all()
            return {"entity": entity, "invalidated": True}

        eid = (entity_id or "").strip()
        if not eid:
            raise ValidationError("Missing entity_id")

        if entity == "product":
            invalidation.invalidate_product_caches(eid)
        elif entity == "customer":
            invalidation.invalidate_customer_caches(eid)
        elif entity == "order":
            invalidation.invalidate_order_caches(eid, (customer_id or "").strip() or None)
        else:
            raise ValidationError(f"Unknown entity: {entity}")

        return {"entity": entity, "entity_id": eid, "invalidated": True}

    @mcp.tool(name="warm_up_products")
    async def warm_up_products() -> Dict[str, Any]:
        """Pre-load every product into the products cache (best-effort)."""
        loaded = await product_store.warm_up()
        return {"loaded": loaded}
