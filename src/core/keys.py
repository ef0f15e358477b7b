"""Cache key builders shared by the record stores and invalidation recipes.

Invalidation matches keys by literal substring, so every builder keeps a
stable `<entity>:<id>` prefix.
"""

from __future__ import annotations


def product_key(product_id: str) -> str:
    return f"product:{product_id}"


def product_list_key(scope: str = "all") -> str:
    return f"product:list:{scope}"


def customer_key(customer_id: str) -> str:
    return f"customer:{customer_id}"


def customer_list_key(scope: str = "all") -> str:
    return f"customer:list:{scope}"


def customer_orders_key(customer_id: str) -> str:
    return f"customer:{customer_id}:orders"


def customer_orders_pattern(customer_id: str) -> str:
    # Trailing colon stops customer "1" from matching customer "10"
    return f"customer:{customer_id}:"


def order_key(order_id: str) -> str:
    return f"order:{order_id}"


def order_list_key(scope: str = "all") -> str:
    return f"order:list:{scope}"


def search_key(query: str) -> str:
    normalized = " ".join((query or "").lower().split())
    return f"search:product:{normalized}"
