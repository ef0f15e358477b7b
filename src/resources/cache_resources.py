import json
from dataclasses import asdict

from mcp.server.fastmcp import FastMCP

from core.cache_manager import CacheManager


def register_resources(mcp: FastMCP, *, manager: CacheManager) -> None:
    """
    Register read-only cache resources for the MCP server.
    """

    @mcp.resource(
        "cache://config",
        mime_type="application/json",
        description="Configuration of every registered cache",
    )
    def cache_config() -> str:
        configs = {name: asdict(manager.get_cache(name).config) for name in manager.names()}
        return json.dumps(configs, indent=2, sort_keys=True)
