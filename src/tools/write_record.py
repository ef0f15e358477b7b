"""MCP tools that write webshop records and invalidate the stale cache entries.

Registers 'update_record', 'remove_record' and 'update_order_status'. Each
calls the database mutation first, then the domain's invalidation recipe.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from stores.record_store import Domain, RecordStore

StoreFactory = Callable[[Domain], RecordStore]

_DOMAINS = ("products", "customers", "orders")


def _require_id(record_id: str) -> str:
    rid = (record_id or "").strip()
    if not rid:
        raise ValidationError("Missing record_id")
    return rid


def register(mcp: FastMCP, *, store_factory: StoreFactory) -> None:
    @mcp.tool(name="update_record")
    async def update_record(
        domain: Domain,
        record_id: str = "",
        fields: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Update fields of a product or customer.

        Params:
          - domain: "products" or "customers" (orders change via update_order_status).
          - record_id: database id of the record (required).
          - fields: field values to set (required, non-empty).
        """
        rid = _require_id(record_id)
        if not fields:
            raise ValidationError("Missing fields to update")

        if domain not in _DOMAINS:
            raise ValidationError(f"Unknown domain: {domain}")

        # Orders have no generic update
        update = getattr(store_factory(domain), "update", None)
        if update is None:
            raise ValidationError(f"Domain does not support update_record: {domain}")

        result = await update(rid, fields)
        return {"domain": domain, "record_id": rid, "result": result}

    @mcp.tool(name="remove_record")
    async def remove_record(domain: Domain, record_id: str = "") -> Dict[str, Any]:
        """Remove a record and drop every cache entry it affects."""
        rid = _require_id(record_id)
        if domain not in _DOMAINS:
            raise ValidationError(f"Unknown domain: {domain}")

        result = await store_factory(domain).remove(rid)
        return {"domain": domain, "record_id": rid, "result": result}

    @mcp.tool(name="update_order_status")
    async def update_order_status(order_id: str = "", status: str = "") -> Dict[str, Any]:
        """Move an order to "pending", "processing", "shipped", "delivered" or "cancelled"."""
        oid = _require_id(order_id)

        result = await store_factory("orders").update_status(oid, status)
        return {"order_id": oid, "status": status, "result": result}
