import json

import httpx
import pytest

from clients.convex_client import ConvexClient
from core.errors import ExternalServiceError, ValidationError


def _patch_transport(monkeypatch, handler):
    # Patch AsyncClient to use MockTransport.
    orig = httpx.AsyncClient

    def patched_async_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return orig(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", patched_async_client)


class FakeLimiter:
    def __init__(self):
        self.seen = []

    async def maybe_sleep_and_retry(self, response):
        self.seen.append(response.status_code)
        return response.status_code == 429


@pytest.mark.asyncio
async def test_query_success_returns_value(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success", "value": {"_id": "p1"}, "logLines": []})

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example/", admin_key="secret")

    out = await c.query("products:get", {"id": "p1"})

    assert out == {"_id": "p1"}
    assert seen["path"] == "/api/query"
    assert seen["auth"] == "Convex secret"
    assert seen["body"] == {"path": "products:get", "args": {"id": "p1"}, "format": "json"}


@pytest.mark.asyncio
async def test_mutation_posts_to_mutation_endpoint(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"status": "success", "value": None})

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example")

    assert await c.mutation("products:remove", {"id": "p1"}) is None
    assert seen["path"] == "/api/mutation"
    assert seen["auth"] is None


@pytest.mark.asyncio
async def test_error_payload_raises(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"status": "error", "errorMessage": "Invalid id"})

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example")

    with pytest.raises(ExternalServiceError, match="Invalid id"):
        await c.query("products:get", {"id": "??"})


@pytest.mark.asyncio
async def test_http_error_raises(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example")

    with pytest.raises(ExternalServiceError):
        await c.query("products:list")


@pytest.mark.asyncio
async def test_network_error_raises(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example")

    with pytest.raises(ExternalServiceError, match="unreachable"):
        await c.query("products:list")


@pytest.mark.asyncio
async def test_throttled_request_is_retried(monkeypatch):
    responses = [
        httpx.Response(429, headers={"Retry-After": "1"}),
        httpx.Response(200, json={"status": "success", "value": [1, 2]}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    _patch_transport(monkeypatch, handler)
    limiter = FakeLimiter()
    c = ConvexClient(base_url="https://db.example", rate_limiter=limiter)

    assert await c.query("products:list") == [1, 2]
    assert limiter.seen == [429, 200]


@pytest.mark.asyncio
async def test_retries_are_bounded(monkeypatch):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(429)

    _patch_transport(monkeypatch, handler)
    c = ConvexClient(base_url="https://db.example", rate_limiter=FakeLimiter())

    with pytest.raises(ExternalServiceError):
        await c.query("products:list")
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_missing_path_or_url_raises_validation_error():
    with pytest.raises(ValidationError):
        await ConvexClient(base_url="https://db.example").query("  ")

    with pytest.raises(ValidationError):
        await ConvexClient(base_url="").query("products:list")
