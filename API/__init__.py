# ============================================================
# FILE: API/__init__.py
# ROLE: Exchange source adapters (public REST only)
# ============================================================

from __future__ import annotations

from typing import Dict, List, Type

from .base_client import ExchangeClient
from .BINANCE.client import BinanceClient
from .BITGET.client import BitgetClient
from .BYBIT.client import BybitClient
from .GATE.client import GateClient
from .MEXC.client import MexcClient
from .OKX.client import OkxClient

CLIENTS: Dict[str, Type[ExchangeClient]] = {
    "binance": BinanceClient,
    "okx": OkxClient,
    "bybit": BybitClient,
    "mexc": MexcClient,
    "bitget": BitgetClient,
    "gate": GateClient,
}


def build_clients(names: List[str], *, logger, quote: str, timeout_sec: float, mexc_min_turnover_24h: float) -> List[ExchangeClient]:
    out: List[ExchangeClient] = []
    for n in names:
        cls = CLIENTS.get(str(n).strip().lower())
        if cls is None:
            logger.warning(f"[APP] unknown exchange {n!r} skipped")
            continue
        if cls is MexcClient:
            out.append(cls(logger=logger, quote=quote, timeout_sec=timeout_sec, min_turnover_24h=mexc_min_turnover_24h))
        else:
            out.append(cls(logger=logger, quote=quote, timeout_sec=timeout_sec))
    return out
