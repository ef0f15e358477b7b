"""MCP tools exposing cache statistics and the health report.

Registers 'cache_stats' (raw per-cache counters) and 'cache_report'
(aggregate hit rate, health status and recommendations).
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.cache_manager import CacheManager
from core.monitoring import CacheMonitoring


def register(mcp: FastMCP, *, manager: CacheManager, monitoring: CacheMonitoring) -> None:
    @mcp.tool(name="cache_stats")
    async def cache_stats() -> Dict[str, Dict[str, Any]]:
        """Return hit/miss/set/delete/eviction counters for every named cache."""
        return {name: stats.to_dict() for name, stats in manager.get_all_stats().items()}

    @mcp.tool(name="cache_report")
    async def cache_report() -> Dict[str, Any]:
        """Return the cache health report and log it.

        Health is "healthy" at >= 60% aggregate hit rate, "warning" at
        30-60% and "critical" below 30%.
        """
        return monitoring.log_metrics().to_dict()
