# ============================================================
# FILE: API/OKX/funding.py
# ROLE: OKX SWAP funding + tickers via REST (v5 public).
# ENDPOINTS:
#   GET https://www.okx.com/api/v5/public/funding-rate?instId=ANY
#   GET https://www.okx.com/api/v5/market/tickers?instType=SWAP
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from API.base_client import RestApi
from c_utils import Utils

MS_PER_HOUR = 3_600_000


@dataclass(frozen=True)
class FundingInfo:
    inst_id: str
    funding_rate: float
    funding_time_ms: int       # settlement the current rate applies to
    next_funding_time_ms: int  # the one after

    @property
    def interval_hours(self) -> Optional[float]:
        if self.funding_time_ms > 0 and self.next_funding_time_ms > self.funding_time_ms:
            return (self.next_funding_time_ms - self.funding_time_ms) / MS_PER_HOUR
        return None


class OkxFunding(RestApi):
    BASE_URL = "https://www.okx.com"
    NAME = "OKX"

    @staticmethod
    def _data(payload: Any, what: str) -> list:
        if not isinstance(payload, dict):
            raise RuntimeError(f"OKX {what}: unexpected payload {str(payload)[:200]}")
        if str(payload.get("code")) != "0":
            raise RuntimeError(f"OKX {what}: code={payload.get('code')} msg={payload.get('msg')}")
        data = payload.get("data")
        return data if isinstance(data, list) else []

    @classmethod
    def parse_funding(cls, payload: Any) -> List[FundingInfo]:
        out: List[FundingInfo] = []
        for obj in cls._data(payload, "funding-rate"):
            if not isinstance(obj, dict) or not obj.get("instId"):
                continue
            out.append(
                FundingInfo(
                    inst_id=str(obj["instId"]).upper().strip(),
                    funding_rate=Utils.safe_float(obj.get("fundingRate"), 0.0),
                    funding_time_ms=Utils.safe_int(obj.get("fundingTime"), 0),
                    next_funding_time_ms=Utils.safe_int(obj.get("nextFundingTime"), 0),
                )
            )
        return out

    @classmethod
    def parse_prices(cls, payload: Any) -> Dict[str, float]:
        """instId -> last price (mark price fallback)."""
        out: Dict[str, float] = {}
        for obj in cls._data(payload, "tickers"):
            if not isinstance(obj, dict) or not obj.get("instId"):
                continue
            px = Utils.safe_float(obj.get("last"), 0.0)
            if px <= 0:
                px = Utils.safe_float(obj.get("markPx"), 0.0)
            if px > 0:
                out[str(obj["instId"]).upper().strip()] = px
        return out

    async def get_funding(self) -> List[FundingInfo]:
        payload = await self._get_json("/api/v5/public/funding-rate", params={"instId": "ANY"})
        return self.parse_funding(payload)

    async def get_prices(self) -> Dict[str, float]:
        payload = await self._get_json("/api/v5/market/tickers", params={"instType": "SWAP"})
        return self.parse_prices(payload)
