# ============================================================
# FILE: CORE/arb_math.py
# ROLE: Pure math for settlement projection and pair evaluation.
# ============================================================

from __future__ import annotations

import math

MS_PER_HOUR = 3_600_000


class ArbMath:
    """Pure math helpers. No IO, no cache access, no side effects."""

    @staticmethod
    def calc_settlements_count(*, next_settlement_ms: int, interval_hours: float, target_ms: int) -> int:
        """How many settlements a leg realizes in (now, target_ms].

        0 if the leg's next settlement is after target_ms, otherwise
        1 + floor((target - next) / interval).
        """
        if int(next_settlement_ms) > int(target_ms):
            return 0
        interval_ms = float(interval_hours) * MS_PER_HOUR
        if interval_ms <= 0:
            return 0
        return 1 + int(math.floor((int(target_ms) - int(next_settlement_ms)) / interval_ms))

    @staticmethod
    def calc_accumulated_rate(*, funding_rate: float, settlements: int) -> float:
        if settlements <= 0:
            return 0.0
        return float(funding_rate) * int(settlements)

    @staticmethod
    def calc_price_spread(*, low_price: float, high_price: float) -> float:
        """Entry cost of the price-divergence leg, as a fraction of the high-rate leg price."""
        return (float(low_price) - float(high_price)) / float(high_price)

    @staticmethod
    def calc_net_profit(*, high_accumulated: float, low_accumulated: float, price_spread: float) -> float:
        return (float(high_accumulated) - float(low_accumulated)) - float(price_spread)
