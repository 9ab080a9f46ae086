# ============================================================
# FILE: API/BINANCE/client.py
# ROLE: Thin exchange client wrapper to provide unified interface for CORE.
# ============================================================

from __future__ import annotations

from typing import Dict

from API.base_client import ExchangeClient
from c_log import UnifiedLogger
from CORE.models import ContractFact
from CORE.symbols import SymbolNormalizer

from .funding import BinanceFunding


class BinanceClient(ExchangeClient):
    """premiumIndex returns every symbol in one call; intervals come from fundingInfo.

    premiumIndex has no last price, so Binance facts are priced at markPrice.
    """

    name = "Binance"

    def __init__(self, *, logger: UnifiedLogger, quote: str = "USDT", timeout_sec: float = 10.0):
        super().__init__(logger=logger, quote=quote)
        self.api = BinanceFunding(timeout_sec=timeout_sec)

    async def refresh_schedule(self) -> None:
        raw = await self.api.get_intervals()
        intervals: Dict[str, float] = {}
        for sym, h in raw.items():
            canon = SymbolNormalizer.to_canonical(SymbolNormalizer.parse_concat_symbol(sym, quote=self.quote))
            if canon:
                intervals[canon] = h
        await self.schedule.replace(intervals)
        self.logger.info(f"[SCHEDULE] {self.name}: {len(intervals)} non-default intervals cached")

    async def fetch(self) -> Dict[str, ContractFact]:
        rows = await self.api.get_all()
        intervals = await self.schedule.snapshot()
        out: Dict[str, ContractFact] = {}
        for r in rows:
            canon = SymbolNormalizer.to_canonical(SymbolNormalizer.parse_concat_symbol(r.symbol, quote=self.quote))
            if not canon or r.mark_price <= 0:
                continue
            out[canon] = ContractFact(
                symbol=canon,
                price=r.mark_price,
                funding_rate=r.funding_rate,
                funding_interval_hours=intervals.get(canon, self.schedule.default_interval_hours),
                next_settlement_time_ms=r.next_funding_time_ms,
            )
        return out
