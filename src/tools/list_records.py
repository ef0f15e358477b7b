"""MCP tools listing webshop records through the domain caches.

Registers 'list_records' (all records of a domain) and
'list_customer_orders' (one customer's orders).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from stores.record_store import Domain, RecordStore

StoreFactory = Callable[[Domain], RecordStore]

_DOMAINS = ("products", "customers", "orders")


def register(mcp: FastMCP, *, store_factory: StoreFactory) -> None:
    @mcp.tool(name="list_records")
    async def list_records(domain: Domain = "products") -> List[Dict[str, Any]]:
        """List every record of a domain, served from cache when fresh.

        Params:
          - domain: "products", "customers" or "orders" (default: "products").
        """
        if domain not in _DOMAINS:
            raise ValidationError(f"Unknown domain: {domain}")

        return await store_factory(domain).list()

    @mcp.tool(name="list_customer_orders")
    async def list_customer_orders(customer_id: str = "") -> List[Dict[str, Any]]:
        """List the orders of one customer, newest first."""
        if not customer_id or not customer_id.strip():
            raise ValidationError("Missing customer_id")

        return await store_factory("orders").list_for_customer(customer_id)
