"""
app/core/http_client.py
Shared async httpx client.
  • tasty_client() → lazily created TastyClient around one AsyncClient
  • close_all()    → called from the app lifespan on shutdown
"""

import asyncio
import logging
import random
from typing import Optional

import httpx

from app.core.config import (
    TASTY_BASE, UPSTREAM_RETRIES, UPSTREAM_RETRY_JITTER_S, UPSTREAM_TIMEOUT_S,
    rapidapi_key, tasty_headers,
)
from app.core.errors import UpstreamError
from app.models import RawPayload

log = logging.getLogger("tasty")

_LIMITS  = httpx.Limits(max_connections=20, max_keepalive_connections=10)
_TIMEOUT = httpx.Timeout(UPSTREAM_TIMEOUT_S, connect=min(UPSTREAM_TIMEOUT_S, 5.0))


class TastyClient:
    """
    Authenticated GET against the Tasty API.

    No retries unless `retries` > 0; a single failed call fails the request.
    The key is read per call so rotating RAPIDAPI_KEY needs no restart.
    """

    def __init__(
        self,
        base_url: str = TASTY_BASE,
        retries: int = UPSTREAM_RETRIES,
        jitter_s: float = UPSTREAM_RETRY_JITTER_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.retries  = max(retries, 0)
        self.jitter_s = jitter_s
        self._http = httpx.AsyncClient(
            timeout=_TIMEOUT,
            follow_redirects=True,
            limits=_LIMITS,
            transport=transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def _get_once(self, endpoint: str, params: dict[str, str]) -> RawPayload:
        url = f"{self.base_url}{endpoint}"
        try:
            resp = await self._http.get(url, params=params, headers=tasty_headers(rapidapi_key()))
        except httpx.HTTPError as ex:
            log.error(f"Tasty request failed ({endpoint}): {ex!r}")
            raise UpstreamError(None) from ex

        log.info(f"Fetched from Tasty API: {resp.request.url}")
        if not resp.is_success:
            log.error(f"Tasty API error: {resp.status_code} {resp.reason_phrase} for {endpoint}")
            raise UpstreamError(resp.status_code)
        return resp.json()

    async def fetch(self, endpoint: str, params: Optional[dict[str, str]] = None) -> RawPayload:
        """GET {base}{endpoint}?params — empty values are dropped from the query."""
        query = {k: str(v) for k, v in (params or {}).items() if v not in (None, "")}
        attempt = 0
        while True:
            try:
                return await self._get_once(endpoint, query)
            except UpstreamError as ex:
                if attempt >= self.retries or not ex.transient:
                    raise
                attempt += 1
                delay = random.uniform(0, self.jitter_s)
                log.warning(f"Retrying {endpoint} in {delay:.2f}s ({attempt}/{self.retries})")
                await asyncio.sleep(delay)

    async def aclose(self) -> None:
        if not self._http.is_closed:
            await self._http.aclose()


_tasty_client: Optional[TastyClient] = None


async def tasty_client() -> TastyClient:
    """FastAPI dependency. Runs on the event loop, so only one client is ever built."""
    global _tasty_client
    if _tasty_client is None or _tasty_client.is_closed:
        _tasty_client = TastyClient()
    return _tasty_client


async def close_all() -> None:
    if _tasty_client is not None:
        await _tasty_client.aclose()
