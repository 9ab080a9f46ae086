# ============================================================
# FILE: CORE/models.py
# ROLE: Normalized contract facts + opportunity records shared by CORE.
# ============================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

DEFAULT_FUNDING_INTERVAL_HOURS = 8.0


@dataclass(frozen=True)
class ContractFact:
    """One exchange's observation of one symbol at fetch time.

    funding_rate: signed fraction per settlement (0.0001 == 0.01%)
    next_settlement_time_ms: UTC epoch milliseconds, 0 => unknown
    """

    symbol: str
    price: float
    funding_rate: float
    funding_interval_hours: float = DEFAULT_FUNDING_INTERVAL_HOURS
    next_settlement_time_ms: int = 0

    def __post_init__(self) -> None:
        h = self.funding_interval_hours
        if not isinstance(h, (int, float)) or not math.isfinite(h) or h <= 0:
            object.__setattr__(self, "funding_interval_hours", DEFAULT_FUNDING_INTERVAL_HOURS)

    @property
    def is_valid(self) -> bool:
        """Usable for time-aligned analysis."""
        return (
            isinstance(self.price, (int, float))
            and self.price > 0
            and isinstance(self.funding_rate, (int, float))
            and math.isfinite(self.funding_rate)
            and self.next_settlement_time_ms > 0
        )


# source name -> {symbol -> ContractFact}
SourceTable = Dict[str, Dict[str, ContractFact]]


@dataclass(frozen=True)
class Opportunity:
    """Cross-exchange funding opportunity for one symbol at one settlement instant."""

    ts_ms: int
    symbol: str

    high_source: str
    low_source: str

    # raw per-settlement rates (fraction)
    high_rate: float
    low_rate: float

    # projected to target_time_ms
    high_accumulated_rate: float
    low_accumulated_rate: float
    high_settlements: int
    low_settlements: int

    high_price: float
    low_price: float
    high_interval_hours: float
    low_interval_hours: float

    price_spread: float
    net_profit: float

    target_time_ms: int
    time_to_target_hours: float

    @property
    def dedup_key(self) -> Tuple[str, str, str]:
        # direction-sensitive: (S, A, B) != (S, B, A)
        return (self.symbol, self.high_source, self.low_source)
