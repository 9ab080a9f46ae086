# ============================================================
# FILE: API/BINANCE/funding.py
# ROLE: Binance USDT-M Futures funding via REST (ONLY funding here).
# ENDPOINTS:
#   GET https://fapi.binance.com/fapi/v1/premiumIndex
#   GET https://fapi.binance.com/fapi/v1/fundingInfo
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from API.base_client import RestApi
from c_utils import Utils


@dataclass(frozen=True)
class FundingInfo:
    symbol: str
    mark_price: float
    funding_rate: float
    next_funding_time_ms: int


class BinanceFunding(RestApi):
    """Public funding REST client.

    Notes:
        - premiumIndex without symbol => LIST for ALL symbols (no interval field)
        - fundingInfo lists only symbols whose interval/caps were adjusted;
          everything else settles every 8h
    """

    BASE_URL = "https://fapi.binance.com"
    NAME = "Binance"

    @staticmethod
    def parse_premium_index(data: Any) -> List[FundingInfo]:
        if not isinstance(data, list):
            raise RuntimeError(f"Binance premiumIndex: unexpected payload {str(data)[:200]}")
        out: List[FundingInfo] = []
        for obj in data:
            row = BinanceFunding._parse_one(obj)
            if row is not None:
                out.append(row)
        return out

    @staticmethod
    def _parse_one(obj: Any) -> Optional[FundingInfo]:
        if not isinstance(obj, dict):
            return None
        sym = obj.get("symbol")
        if not sym:
            return None
        # premiumIndex uses lastFundingRate + nextFundingTime
        return FundingInfo(
            symbol=str(sym).upper().strip(),
            mark_price=Utils.safe_float(obj.get("markPrice"), 0.0),
            funding_rate=Utils.safe_float(obj.get("lastFundingRate"), 0.0),
            next_funding_time_ms=Utils.safe_int(obj.get("nextFundingTime"), 0),
        )

    @staticmethod
    def parse_funding_info(data: Any) -> Dict[str, float]:
        if not isinstance(data, list):
            raise RuntimeError(f"Binance fundingInfo: unexpected payload {str(data)[:200]}")
        out: Dict[str, float] = {}
        for obj in data:
            if not isinstance(obj, dict) or not obj.get("symbol"):
                continue
            h = Utils.safe_float(obj.get("fundingIntervalHours"), 0.0)
            if h > 0:
                out[str(obj["symbol"]).upper().strip()] = h
        return out

    async def get_all(self) -> List[FundingInfo]:
        data = await self._get_json("/fapi/v1/premiumIndex")
        return self.parse_premium_index(data)

    async def get_intervals(self) -> Dict[str, float]:
        data = await self._get_json("/fapi/v1/fundingInfo")
        return self.parse_funding_info(data)
