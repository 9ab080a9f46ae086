# ============================================================
# FILE: API/BITGET/funding.py
# ROLE: Bitget USDT-M Futures funding + tickers via REST (aiohttp)
# ENDPOINTS:
#   GET /api/v2/mix/market/current-fund-rate?productType=usdt-futures
#   GET /api/v2/mix/market/tickers?productType=usdt-futures
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from API.base_client import RestApi
from c_utils import Utils

_OK_CODES = ("00000", "0", "200")


@dataclass(frozen=True)
class FundingInfo:
    symbol: str
    funding_rate: float
    next_funding_time_ms: int
    interval_hours: float  # 0.0 => not in payload


class BitgetFunding(RestApi):
    """Public REST client.

    Bulk request (no symbol) returns every USDT-M contract:
        GET https://api.bitget.com/api/v2/mix/market/current-fund-rate
    """

    BASE_URL = "https://api.bitget.com"
    NAME = "Bitget"
    PRODUCT_TYPE = "usdt-futures"

    @staticmethod
    def _data(j: Any, what: str) -> list:
        if not isinstance(j, dict):
            raise RuntimeError(f"Bitget {what}: unexpected payload {str(j)[:200]}")
        if str(j.get("code")) not in _OK_CODES:
            raise RuntimeError(f"Bitget {what}: code={j.get('code')} msg={j.get('msg')}")
        data = j.get("data")
        return data if isinstance(data, list) else []

    @classmethod
    def parse_funding(cls, j: Any) -> List[FundingInfo]:
        out: List[FundingInfo] = []
        for it in cls._data(j, "current-fund-rate"):
            if not isinstance(it, dict):
                continue
            sym = str(it.get("symbol") or "").upper().strip()
            if not sym:
                continue
            out.append(
                FundingInfo(
                    symbol=sym,
                    funding_rate=Utils.safe_float(it.get("fundingRate"), 0.0),
                    next_funding_time_ms=Utils.safe_int(it.get("nextUpdate"), 0),
                    interval_hours=Utils.safe_float(it.get("fundingRateInterval"), 0.0),
                )
            )
        return out

    @classmethod
    def parse_prices(cls, j: Any) -> Dict[str, float]:
        out: Dict[str, float] = {}
        for it in cls._data(j, "tickers"):
            if not isinstance(it, dict):
                continue
            sym = str(it.get("symbol") or "").upper().strip()
            if not sym:
                continue
            px = Utils.safe_float(it.get("lastPr"), 0.0)
            if px <= 0:
                px = Utils.safe_float(it.get("markPrice"), 0.0)
            if px > 0:
                out[sym] = px
        return out

    async def get_all(self) -> List[FundingInfo]:
        j = await self._get_json("/api/v2/mix/market/current-fund-rate", params={"productType": self.PRODUCT_TYPE})
        return self.parse_funding(j)

    async def get_prices(self) -> Dict[str, float]:
        j = await self._get_json("/api/v2/mix/market/tickers", params={"productType": self.PRODUCT_TYPE})
        return self.parse_prices(j)
