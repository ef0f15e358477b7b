"""MCP tool that reads a webshop record through the domain cache.

Registers 'get_record' which resolves a cached record store for the
requested domain and returns the record (cache hit or database load).
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from stores.record_store import Domain, RecordStore

StoreFactory = Callable[[Domain], RecordStore]

_DOMAINS = ("products", "customers", "orders")


def register(mcp: FastMCP, *, store_factory: StoreFactory) -> None:
    @mcp.tool(name="get_record")
    async def get_record(domain: Domain = "products", record_id: str = "") -> Dict[str, Any]:
        """Fetch one record by id, served from cache when fresh.

        Params:
          - domain: "products", "customers" or "orders" (default: "products").
          - record_id: database id of the record (required).

        Returns:
          The stored record as a JSON object.

        Raises:
          ValidationError for missing/invalid inputs, NotFoundError when the
          record does not exist, ExternalServiceError when the database fails.
        """
        if domain not in _DOMAINS:
            raise ValidationError(f"Unknown domain: {domain}")
        if not record_id or not record_id.strip():
            raise ValidationError("Missing record_id")

        store = store_factory(domain)
        return await store.get(record_id)
