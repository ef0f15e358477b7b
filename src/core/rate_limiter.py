"""Interpret server-side throttling signals and sleep when needed.

The document database answers 429 (and sometimes 503) with Retry-After
under load. The sleep is bounded so a large hint never stalls a caller.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

import httpx

THROTTLE_STATUSES = frozenset({429, 503})


class RateLimiter:
    def __init__(self, *, max_sleep_seconds: float = 30.0, default_sleep_seconds: float = 1.0) -> None:
        self._max_sleep_seconds = float(max_sleep_seconds)
        self._default_sleep_seconds = float(default_sleep_seconds)

    async def maybe_sleep_and_retry(self, response: httpx.Response) -> bool:
        # Returns True if caller should retry after sleeping.
        if response.status_code not in THROTTLE_STATUSES:
            return False

        retry_after = self._parse_retry_after(response.headers)
        if retry_after is None:
            if response.status_code == 503:
                return False
            retry_after = self._default_sleep_seconds

        await asyncio.sleep(min(retry_after, self._max_sleep_seconds))
        return True

    def _parse_retry_after(self, headers: Mapping[str, str]) -> Optional[float]:
        value = (headers.get("Retry-After") or "").strip()
        if not value:
            return None
        try:
            seconds = float(value)
        except ValueError:
            # HTTP-date form is not used by the database; treat as absent
            return None
        return max(0.0, seconds)
