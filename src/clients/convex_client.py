"""Async client for the hosted document database's HTTP function API.

Queries and mutations are POSTed as `{"path", "args", "format": "json"}` to
`/api/query` and `/api/mutation`. The database replies with either
`{"status": "success", "value": ...}` or `{"status": "error", "errorMessage": ...}`.
Throttling responses are retried a bounded number of times via RateLimiter.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from core.errors import ExternalServiceError, ValidationError
from core.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class ConvexClient:
    """Thin async wrapper used as the record loader behind the caches.

    Purpose:
      - query(path, args) -> Any
      - mutation(path, args) -> Any

    Function paths use the deployment's `module:function` form,
    e.g. "products:get".
    """

    _MAX_RATE_LIMIT_RETRIES = 2  # total attempts = 1 + retries

    def __init__(
        self,
        *,
        base_url: str,
        admin_key: str = "",
        timeout: float = 20.0,
        verify: bool = True,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self._base_url = (base_url or "").strip().rstrip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._headers = self._build_headers((admin_key or "").strip())
        self._rate_limiter = rate_limiter or RateLimiter()

    async def query(self, path: str, args: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._call("query", path, args)

    async def mutation(self, path: str, args: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._call("mutation", path, args)

    # --- HTTP helpers ---

    def _build_headers(self, admin_key: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "webshop-cache",
        }
        if admin_key:
            headers["Authorization"] = f"Convex {admin_key}"
        return headers

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    async def _call(self, kind: str, path: str, args: Optional[Mapping[str, Any]]) -> Any:
        fn_path = (path or "").strip()
        if not fn_path:
            raise ValidationError("Missing database function path")
        if not self._base_url:
            raise ValidationError("DATABASE_URL is not configured")

        body = {"path": fn_path, "args": dict(args or {}), "format": "json"}
        context = f"{kind} {fn_path}"
        attempts = self._MAX_RATE_LIMIT_RETRIES + 1

        async with self._create_client() as client:
            for attempt in range(attempts):
                try:
                    resp = await client.post(f"/api/{kind}", json=body)
                except httpx.HTTPError as e:
                    raise ExternalServiceError(f"Database request failed ({context}): {e}") from e

                if attempt < attempts - 1:
                    if await self._rate_limiter.maybe_sleep_and_retry(resp):
                        logger.debug("Database throttled %s; retrying", context)
                        continue

                return self._unwrap(resp, context=context)

        raise RuntimeError("Unreachable: _call did not return a response")

    def _unwrap(self, resp: httpx.Response, *, context: str) -> Any:
        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("status") == "error":
            message = payload.get("errorMessage") or "unknown error"
            raise ExternalServiceError(f"Database function failed ({context}): {message}")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Database request failed ({context}): {e}") from e

        if not isinstance(payload, dict) or payload.get("status") != "success":
            raise ExternalServiceError(f"Unexpected database response ({context})")
        return payload.get("value")
