# ============================================================
# FILE: API/base_client.py
# ROLE: Shared pieces of every exchange adapter: pooled aiohttp REST access
#       and the adapter contract consumed by CORE.
# ============================================================

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict, List, Optional

import aiohttp

from c_log import UnifiedLogger
from CORE.models import ContractFact
from CORE.schedule_cache import ScheduleCache


class RestApi:
    """Public REST client with a shared aiohttp.ClientSession (connection pooling).

    Transport failures (connection errors, HTTP 429/5xx) are retried a few times
    with a short linear backoff, then surface as RuntimeError with endpoint context.
    """

    BASE_URL = ""
    NAME = "REST"

    def __init__(self, timeout_sec: float = 10.0, retries: int = 2):
        self._timeout = aiohttp.ClientTimeout(total=float(timeout_sec))
        self._retries = max(1, int(retries))
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session
        async with self._session_lock:
            if self._session is not None and not self._session.closed:
                return self._session
            connector = aiohttp.TCPConnector(limit=20, ttl_dns_cache=300)
            self._session = aiohttp.ClientSession(timeout=self._timeout, connector=connector)
            return self._session

    async def aclose(self) -> None:
        if self._session is not None:
            try:
                await self._session.close()
            except (aiohttp.ClientError, OSError):
                pass
        self._session = None

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        url = f"{self.BASE_URL}{path}"
        last_err: Optional[Exception] = None

        for attempt in range(1, self._retries + 1):
            try:
                session = await self._get_session()
                async with session.get(url, params=params) as resp:
                    if resp.status == 429 or resp.status >= 500:
                        txt = await resp.text()
                        raise aiohttp.ClientResponseError(
                            resp.request_info, resp.history, status=resp.status, message=txt[:300]
                        )
                    if resp.status >= 400:
                        txt = await resp.text()
                        raise RuntimeError(f"{self.NAME} {path} HTTP {resp.status}: {txt[:300]}")
                    return await resp.json(content_type=None)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_err = e
                if isinstance(e, aiohttp.ClientConnectionError):
                    await self.aclose()
                if attempt < self._retries:
                    await asyncio.sleep(0.4 * attempt)

        raise RuntimeError(f"{self.NAME} request failed: {path} params={params} err={last_err!r}")


async def gather_legs(*aws: Awaitable[Any]) -> List[Any]:
    """Run the REST legs of one fetch together.

    The first failure cancels the remaining legs and is re-raised, so no
    sibling request outlives the fetch or leaves its error unretrieved.
    """
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class ExchangeClient:
    """Source adapter contract.

    - name: display name used as the source key in the SourceTable
    - initialize(): one-off preparation
    - refresh_schedule(): refresh per-symbol funding intervals (writer side of the cache)
    - fetch(): {canonical symbol -> ContractFact}; raises on source-level failure,
      skips individual malformed records
    """

    name = "BASE"

    def __init__(self, *, logger: UnifiedLogger, quote: str = "USDT"):
        self.logger = logger
        self.quote = (quote or "USDT").upper().strip()
        self.schedule = ScheduleCache()

    async def initialize(self) -> None:
        return None

    async def refresh_schedule(self) -> None:
        return None

    async def fetch(self) -> Dict[str, ContractFact]:
        raise NotImplementedError

    def _apis(self) -> list:
        return [v for v in vars(self).values() if isinstance(v, RestApi)]

    async def shutdown(self) -> None:
        """Best-effort cleanup for long-lived aiohttp sessions."""
        for api in self._apis():
            await api.aclose()
