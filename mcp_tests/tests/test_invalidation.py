import logging

import pytest

from core.cache import CacheConfig
from core.cache_manager import CacheManager
from core.cached_query import CachedQuery
from core.invalidation import CacheInvalidation


@pytest.fixture
def manager():
    m = CacheManager(default_config=CacheConfig())
    m.register_domain_caches()
    return m


@pytest.fixture
def invalidation(manager):
    return CacheInvalidation(manager, CachedQuery())


def _fill(cache, *keys):
    for key in keys:
        cache.set(key, key)


def test_invalidate_product_caches(manager, invalidation):
    _fill(manager.products, "product:1", "product:2", "product:list:all")
    _fill(manager.search, "search:product:mug", "search:other")

    invalidation.invalidate_product_caches("1")

    assert manager.products.keys() == ["product:2"]
    assert manager.search.keys() == ["search:other"]


def test_invalidate_customer_caches(manager, invalidation):
    _fill(manager.customers, "customer:1", "customer:2")
    _fill(manager.orders, "customer:1:orders", "customer:10:orders", "order:5")

    invalidation.invalidate_customer_caches("1")

    assert manager.customers.keys() == ["customer:2"]
    assert sorted(manager.orders.keys()) == ["customer:10:orders", "order:5"]


def test_invalidate_order_caches_without_customer(manager, invalidation):
    _fill(manager.orders, "order:5", "order:6", "customer:1:orders")

    invalidation.invalidate_order_caches("5")

    assert sorted(manager.orders.keys()) == ["customer:1:orders", "order:6"]


def test_invalidate_order_caches_with_customer(manager, invalidation):
    _fill(manager.orders, "order:5", "customer:1:orders", "customer:2:orders")

    invalidation.invalidate_order_caches("5", "1")

    assert manager.orders.keys() == ["customer:2:orders"]


def test_invalidate_all_clears_every_cache(manager, invalidation, caplog):
    _fill(manager.products, "product:1")
    _fill(manager.orders, "order:1")

    with caplog.at_level(logging.INFO, logger="core.invalidation"):
        invalidation.invalidate_all()

    assert all(manager.get_cache(name).size() == 0 for name in manager.names())
    assert manager.names() == ["products", "customers", "orders", "search"]
    assert "All caches invalidated" in caplog.text
