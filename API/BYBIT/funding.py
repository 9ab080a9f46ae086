# ============================================================
# FILE: API/BYBIT/funding.py
# ROLE: Bybit v5 linear tickers + instrument funding intervals via REST.
# ENDPOINTS:
#   GET https://api.bybit.com/v5/market/tickers?category=linear
#   GET https://api.bybit.com/v5/market/instruments-info?category=linear
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from API.base_client import RestApi
from c_utils import Utils


@dataclass(frozen=True)
class TickerInfo:
    symbol: str
    price: float
    funding_rate: float
    next_funding_time_ms: int
    interval_hours: float  # 0.0 => not in payload


class BybitFunding(RestApi):
    BASE_URL = "https://api.bybit.com"
    NAME = "Bybit"

    MAX_PAGES = 20

    @staticmethod
    def _result(payload: Any, what: str) -> dict:
        if not isinstance(payload, dict):
            raise RuntimeError(f"Bybit {what}: unexpected payload {str(payload)[:200]}")
        if Utils.safe_int(payload.get("retCode"), -1) != 0:
            raise RuntimeError(f"Bybit {what}: retCode={payload.get('retCode')} retMsg={payload.get('retMsg')}")
        res = payload.get("result")
        return res if isinstance(res, dict) else {}

    @classmethod
    def parse_tickers(cls, payload: Any) -> List[TickerInfo]:
        out: List[TickerInfo] = []
        for obj in cls._result(payload, "tickers").get("list") or []:
            row = cls._parse_ticker(obj)
            if row is not None:
                out.append(row)
        return out

    @staticmethod
    def _parse_ticker(obj: Any) -> Optional[TickerInfo]:
        if not isinstance(obj, dict) or not obj.get("symbol"):
            return None
        # pre-market / delisted rows come with an empty fundingRate
        if obj.get("fundingRate") in (None, ""):
            return None
        px = Utils.safe_float(obj.get("lastPrice"), 0.0)
        if px <= 0:
            px = Utils.safe_float(obj.get("markPrice"), 0.0)
        return TickerInfo(
            symbol=str(obj["symbol"]).upper().strip(),
            price=px,
            funding_rate=Utils.safe_float(obj.get("fundingRate"), 0.0),
            next_funding_time_ms=Utils.safe_int(obj.get("nextFundingTime"), 0),
            interval_hours=Utils.safe_float(obj.get("fundingIntervalHour"), 0.0),
        )

    @classmethod
    def parse_instruments_page(cls, payload: Any) -> Tuple[Dict[str, float], str]:
        """-> ({symbol: interval hours}, nextPageCursor)"""
        res = cls._result(payload, "instruments-info")
        out: Dict[str, float] = {}
        for obj in res.get("list") or []:
            if not isinstance(obj, dict) or not obj.get("symbol"):
                continue
            minutes = Utils.safe_float(obj.get("fundingInterval"), 0.0)
            if minutes > 0:
                out[str(obj["symbol"]).upper().strip()] = minutes / 60.0
        return out, str(res.get("nextPageCursor") or "")

    async def get_tickers(self) -> List[TickerInfo]:
        payload = await self._get_json("/v5/market/tickers", params={"category": "linear"})
        return self.parse_tickers(payload)

    async def get_intervals(self) -> Dict[str, float]:
        out: Dict[str, float] = {}
        cursor = ""
        for _ in range(self.MAX_PAGES):
            params = {"category": "linear", "limit": "1000"}
            if cursor:
                params["cursor"] = cursor
            payload = await self._get_json("/v5/market/instruments-info", params=params)
            page, cursor = self.parse_instruments_page(payload)
            out.update(page)
            if not cursor:
                break
        return out
