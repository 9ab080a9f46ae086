# ============================================================
# FILE: API/GATE/funding.py
# ROLE: Gate USDT futures contracts (price + funding in one payload) via REST.
# ENDPOINT: GET https://api.gateio.ws/api/v4/futures/usdt/contracts
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from API.base_client import RestApi
from c_utils import Utils


@dataclass(frozen=True)
class ContractInfo:
    name: str
    price: float
    funding_rate: float
    interval_hours: float
    next_apply_ms: int


class GateFunding(RestApi):
    """Gate reports funding_interval and funding_next_apply in SECONDS."""

    BASE_URL = "https://api.gateio.ws"
    NAME = "Gate"

    @staticmethod
    def parse_contracts(data: Any) -> List[ContractInfo]:
        if not isinstance(data, list):
            raise RuntimeError(f"Gate contracts: unexpected payload {str(data)[:200]}")
        out: List[ContractInfo] = []
        for obj in data:
            row = GateFunding._parse_one(obj)
            if row is not None:
                out.append(row)
        return out

    @staticmethod
    def _parse_one(obj: Any) -> Optional[ContractInfo]:
        if not isinstance(obj, dict) or not obj.get("name"):
            return None
        if obj.get("in_delisting"):
            return None
        px = Utils.safe_float(obj.get("last_price"), 0.0)
        if px <= 0:
            px = Utils.safe_float(obj.get("mark_price"), 0.0)
        return ContractInfo(
            name=str(obj["name"]).upper().strip(),
            price=px,
            funding_rate=Utils.safe_float(obj.get("funding_rate"), 0.0),
            interval_hours=Utils.safe_float(obj.get("funding_interval"), 0.0) / 3600.0,
            next_apply_ms=Utils.safe_int(obj.get("funding_next_apply"), 0) * 1000,
        )

    async def get_contracts(self) -> List[ContractInfo]:
        data = await self._get_json("/api/v4/futures/usdt/contracts")
        return self.parse_contracts(data)
