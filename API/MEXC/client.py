# ============================================================
# FILE: API/MEXC/client.py
# ROLE: Thin exchange client wrapper to provide unified interface for CORE.
# ============================================================

from __future__ import annotations

from typing import Dict

from API.base_client import ExchangeClient, gather_legs
from c_log import UnifiedLogger
from CORE.models import ContractFact
from CORE.symbols import SymbolNormalizer

from .funding import MexcFunding


class MexcClient(ExchangeClient):
    """Thin contracts are dropped: 24h turnover below min_turnover_24h never reaches CORE."""

    name = "MEXC"

    def __init__(
        self,
        *,
        logger: UnifiedLogger,
        quote: str = "USDT",
        timeout_sec: float = 10.0,
        min_turnover_24h: float = 1_000_000.0,
    ):
        super().__init__(logger=logger, quote=quote)
        self.api = MexcFunding(timeout_sec=timeout_sec)
        self.min_turnover_24h = float(min_turnover_24h)

    def _canon(self, sym: str):
        return SymbolNormalizer.to_canonical(SymbolNormalizer.parse_underscore_symbol(sym, quote=self.quote))

    async def refresh_schedule(self) -> None:
        rows = await self.api.get_funding()
        intervals: Dict[str, float] = {}
        for r in rows:
            canon = self._canon(r.symbol)
            if canon and r.interval_hours > 0:
                intervals[canon] = r.interval_hours
        await self.schedule.replace(intervals)
        self.logger.info(f"[SCHEDULE] {self.name}: {len(intervals)} intervals cached")

    async def fetch(self) -> Dict[str, ContractFact]:
        rows, tickers = await gather_legs(self.api.get_funding(), self.api.get_tickers())
        cached = await self.schedule.snapshot()
        out: Dict[str, ContractFact] = {}
        thin = 0
        for r in rows:
            canon = self._canon(r.symbol)
            t = tickers.get(r.symbol)
            if not canon or t is None or t.price <= 0:
                continue
            if t.turnover_24h < self.min_turnover_24h:
                thin += 1
                continue
            out[canon] = ContractFact(
                symbol=canon,
                price=t.price,
                funding_rate=r.funding_rate,
                funding_interval_hours=r.interval_hours or cached.get(canon, self.schedule.default_interval_hours),
                next_settlement_time_ms=r.next_settle_time_ms,
            )
        if thin:
            self.logger.debug(f"[AGG] {self.name}: {thin} contracts below turnover floor {self.min_turnover_24h:g}")
        return out
