# ============================================================
# FILE: API/MEXC/funding.py
# ROLE: MEXC contract funding + tickers via REST.
# ENDPOINTS:
#   GET https://contract.mexc.com/api/v1/contract/funding_rate
#   GET https://contract.mexc.com/api/v1/contract/ticker
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from API.base_client import RestApi
from c_utils import Utils


@dataclass(frozen=True)
class FundingInfo:
    symbol: str
    funding_rate: float
    interval_hours: float  # collectCycle
    next_settle_time_ms: int


@dataclass(frozen=True)
class TickerInfo:
    symbol: str
    price: float
    turnover_24h: float  # amount24, quote currency


class MexcFunding(RestApi):
    BASE_URL = "https://contract.mexc.com"
    NAME = "MEXC"

    @staticmethod
    def _data(payload: Any, what: str) -> list:
        if not isinstance(payload, dict):
            raise RuntimeError(f"MEXC {what}: unexpected payload {str(payload)[:200]}")
        if not payload.get("success", False) or Utils.safe_int(payload.get("code"), -1) != 0:
            raise RuntimeError(f"MEXC {what}: code={payload.get('code')} msg={payload.get('message')}")
        data = payload.get("data")
        return data if isinstance(data, list) else []

    @classmethod
    def parse_funding(cls, payload: Any) -> List[FundingInfo]:
        out: List[FundingInfo] = []
        for obj in cls._data(payload, "funding_rate"):
            if not isinstance(obj, dict) or not obj.get("symbol"):
                continue
            out.append(
                FundingInfo(
                    symbol=str(obj["symbol"]).upper().strip(),
                    funding_rate=Utils.safe_float(obj.get("fundingRate"), 0.0),
                    interval_hours=Utils.safe_float(obj.get("collectCycle"), 0.0),
                    next_settle_time_ms=Utils.safe_int(obj.get("nextSettleTime"), 0),
                )
            )
        return out

    @classmethod
    def parse_tickers(cls, payload: Any) -> Dict[str, TickerInfo]:
        out: Dict[str, TickerInfo] = {}
        for obj in cls._data(payload, "ticker"):
            if not isinstance(obj, dict) or not obj.get("symbol"):
                continue
            sym = str(obj["symbol"]).upper().strip()
            px = Utils.safe_float(obj.get("lastPrice"), 0.0)
            if px <= 0:
                px = Utils.safe_float(obj.get("fairPrice"), 0.0)
            out[sym] = TickerInfo(
                symbol=sym,
                price=px,
                turnover_24h=Utils.safe_float(obj.get("amount24"), 0.0),
            )
        return out

    async def get_funding(self) -> List[FundingInfo]:
        payload = await self._get_json("/api/v1/contract/funding_rate")
        return self.parse_funding(payload)

    async def get_tickers(self) -> Dict[str, TickerInfo]:
        payload = await self._get_json("/api/v1/contract/ticker")
        return self.parse_tickers(payload)
