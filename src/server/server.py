"""Server bootstrap for the webshop cache MCP service.

Builds the cache registry and its helpers, wires the database client,
tools and resources, and starts the MCP server (stdio transport). The
lifespan ties cache sweepers and periodic metrics to the server's life.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import partial

from mcp.server.fastmcp import FastMCP

from clients.convex_client import ConvexClient
from config import (
    CACHE_MONITOR_INTERVAL,
    DATABASE_ADMIN_KEY,
    DATABASE_TIMEOUT,
    DATABASE_URL,
    HTTP_VERIFY,
    LOG_LEVEL,
)
from core.cache_manager import CacheManager
from core.cached_query import CachedQuery
from core.invalidation import CacheInvalidation
from core.monitoring import CacheMonitoring
from stores.store_factory import get_record_store

from tools.cache_report import register as register_cache_report
from tools.get_record import register as register_get_record
from tools.invalidate_cache import register as register_invalidate_cache
from tools.list_records import register as register_list_records
from tools.search_products import register as register_search_products
from tools.write_record import register as register_write_record

from resources.cache_resources import register_resources

logger = logging.getLogger(__name__)

manager = CacheManager()
query = CachedQuery()
invalidation = CacheInvalidation(manager, query)
monitoring = CacheMonitoring(manager)


@asynccontextmanager
async def lifespan(_server):
    manager.register_domain_caches()
    manager.start()
    monitoring.start_periodic_logging(CACHE_MONITOR_INTERVAL)
    logger.info("Cache registry started: %s", ", ".join(manager.names()))
    try:
        yield {}
    finally:
        monitoring.stop_periodic_logging()
        manager.shutdown()
        logger.info("Cache registry shut down")


mcp = FastMCP("webshop-cache", lifespan=lifespan)


def register_tools() -> None:
    client = ConvexClient(
        base_url=DATABASE_URL,
        admin_key=DATABASE_ADMIN_KEY,
        timeout=DATABASE_TIMEOUT,
        verify=HTTP_VERIFY,
    )
    store_factory = partial(
        get_record_store,
        client=client,
        manager=manager,
        query=query,
        invalidation=invalidation,
    )

    product_store = store_factory("products")

    register_get_record(mcp, store_factory=store_factory)
    register_list_records(mcp, store_factory=store_factory)
    register_search_products(mcp, product_store=product_store)
    register_write_record(mcp, store_factory=store_factory)
    register_cache_report(mcp, manager=manager, monitoring=monitoring)
    register_invalidate_cache(mcp, invalidation=invalidation, product_store=product_store)


def register_all() -> None:
    manager.register_domain_caches()
    register_tools()
    register_resources(mcp, manager=manager)


register_all()


def main() -> None:
    # stdout carries the stdio transport
    logging.basicConfig(
        level=LOG_LEVEL,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
