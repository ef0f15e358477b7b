"""MCP tool searching product names and descriptions through the search cache."""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from stores.record_store import ProductStore


def register(mcp: FastMCP, *, product_store: ProductStore) -> None:
    @mcp.tool(name="search_products")
    async def search_products(query: str = "") -> List[Dict[str, Any]]:
        """Return products whose name or description contains `query` (case-insensitive)."""
        if not query or not query.strip():
            raise ValidationError("Missing search query")

        return await product_store.search_products(query)
