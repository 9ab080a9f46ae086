# ============================================================
# FILE: API/BITGET/client.py
# ROLE: Thin exchange client wrapper to provide unified interface for CORE.
# ============================================================

from __future__ import annotations

from typing import Dict

from API.base_client import ExchangeClient, gather_legs
from c_log import UnifiedLogger
from CORE.models import ContractFact
from CORE.symbols import SymbolNormalizer

from .funding import BitgetFunding


class BitgetClient(ExchangeClient):
    name = "Bitget"

    def __init__(self, *, logger: UnifiedLogger, quote: str = "USDT", timeout_sec: float = 10.0):
        super().__init__(logger=logger, quote=quote)
        self.api = BitgetFunding(timeout_sec=timeout_sec)

    def _canon(self, sym: str):
        return SymbolNormalizer.to_canonical(SymbolNormalizer.parse_concat_symbol(sym, quote=self.quote))

    async def refresh_schedule(self) -> None:
        rows = await self.api.get_all()
        intervals: Dict[str, float] = {}
        for r in rows:
            canon = self._canon(r.symbol)
            if canon and r.interval_hours > 0:
                intervals[canon] = r.interval_hours
        await self.schedule.replace(intervals)
        self.logger.info(f"[SCHEDULE] {self.name}: {len(intervals)} intervals cached")

    async def fetch(self) -> Dict[str, ContractFact]:
        rows, prices = await gather_legs(self.api.get_all(), self.api.get_prices())
        cached = await self.schedule.snapshot()
        out: Dict[str, ContractFact] = {}
        for r in rows:
            canon = self._canon(r.symbol)
            price = prices.get(r.symbol, 0.0)
            if not canon or price <= 0:
                continue
            out[canon] = ContractFact(
                symbol=canon,
                price=price,
                funding_rate=r.funding_rate,
                funding_interval_hours=r.interval_hours or cached.get(canon, self.schedule.default_interval_hours),
                next_settlement_time_ms=r.next_funding_time_ms,
            )
        return out
