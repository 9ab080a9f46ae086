# ============================================================
# FILE: API/OKX/client.py
# ROLE: Thin exchange client wrapper to provide unified interface for CORE.
# ============================================================

from __future__ import annotations

from typing import Dict

from API.base_client import ExchangeClient, gather_legs
from c_log import UnifiedLogger
from CORE.models import ContractFact
from CORE.symbols import SymbolNormalizer

from .funding import OkxFunding


class OkxClient(ExchangeClient):
    """OKX does not publish the interval; it is derived from fundingTime -> nextFundingTime."""

    name = "OKX"

    def __init__(self, *, logger: UnifiedLogger, quote: str = "USDT", timeout_sec: float = 10.0):
        super().__init__(logger=logger, quote=quote)
        self.api = OkxFunding(timeout_sec=timeout_sec)

    def _canon(self, inst_id: str):
        return SymbolNormalizer.to_canonical(SymbolNormalizer.parse_okx_inst_id(inst_id, quote=self.quote))

    async def refresh_schedule(self) -> None:
        rows = await self.api.get_funding()
        intervals: Dict[str, float] = {}
        for r in rows:
            canon = self._canon(r.inst_id)
            if canon and r.interval_hours:
                intervals[canon] = r.interval_hours
        await self.schedule.replace(intervals)
        self.logger.info(f"[SCHEDULE] {self.name}: {len(intervals)} intervals cached")

    async def fetch(self) -> Dict[str, ContractFact]:
        rows, prices = await gather_legs(self.api.get_funding(), self.api.get_prices())
        cached = await self.schedule.snapshot()
        fresh: Dict[str, float] = {}
        out: Dict[str, ContractFact] = {}
        for r in rows:
            canon = self._canon(r.inst_id)
            price = prices.get(r.inst_id, 0.0)
            if not canon or price <= 0:
                continue
            interval = r.interval_hours
            if interval:
                fresh[canon] = interval
            else:
                interval = cached.get(canon, self.schedule.default_interval_hours)
            out[canon] = ContractFact(
                symbol=canon,
                price=price,
                funding_rate=r.funding_rate,
                funding_interval_hours=interval,
                next_settlement_time_ms=r.funding_time_ms,
            )
        await self.schedule.update(fresh)
        return out
