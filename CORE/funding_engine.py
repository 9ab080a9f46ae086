# ============================================================
# FILE: CORE/funding_engine.py
# ROLE: Opportunity ranking over time-aligned funding projections.
# ============================================================

from __future__ import annotations

import time
from typing import List, Optional, Sequence

from CORE.alignment import RateProjection, SymbolView, align, build_symbol_views
from CORE.arb_math import ArbMath, MS_PER_HOUR
from CORE.models import Opportunity, SourceTable


class FundingEngine:
    """Cross-exchange funding spread detector.

    What it guarantees:
      - compares legs only at real settlement instants present in the data
      - a leg that has not settled by the instant counts as 0, it is not dropped
      - one opportunity at most per (symbol, instant): the min/max accumulated legs
      - output is ranked by net profit, best first
    """

    def __init__(self, *, threshold: float, logger=None):
        self.threshold = float(threshold)
        self.logger = logger

    def evaluate_at(
        self,
        symbol: str,
        projections: Sequence[RateProjection],
        *,
        target_ms: int,
        now_ms: int,
    ) -> Optional[Opportunity]:
        if len(projections) < 2:
            return None

        ordered = sorted(projections, key=lambda p: (p.accumulated_rate, p.source))
        low = ordered[0]
        high = ordered[-1]

        price_spread = ArbMath.calc_price_spread(low_price=low.fact.price, high_price=high.fact.price)
        net_profit = ArbMath.calc_net_profit(
            high_accumulated=high.accumulated_rate,
            low_accumulated=low.accumulated_rate,
            price_spread=price_spread,
        )
        if not net_profit > self.threshold:
            return None

        return Opportunity(
            ts_ms=int(now_ms),
            symbol=symbol,
            high_source=high.source,
            low_source=low.source,
            high_rate=float(high.fact.funding_rate),
            low_rate=float(low.fact.funding_rate),
            high_accumulated_rate=float(high.accumulated_rate),
            low_accumulated_rate=float(low.accumulated_rate),
            high_settlements=int(high.settlements),
            low_settlements=int(low.settlements),
            high_price=float(high.fact.price),
            low_price=float(low.fact.price),
            high_interval_hours=float(high.fact.funding_interval_hours),
            low_interval_hours=float(low.fact.funding_interval_hours),
            price_spread=float(price_spread),
            net_profit=float(net_profit),
            target_time_ms=int(target_ms),
            time_to_target_hours=(int(target_ms) - int(now_ms)) / MS_PER_HOUR,
        )

    def opportunities_for_view(self, view: SymbolView, *, now_ms: int) -> List[Opportunity]:
        out: List[Opportunity] = []
        for target_ms, projections in align(view, now_ms=now_ms):
            opp = self.evaluate_at(view.symbol, projections, target_ms=target_ms, now_ms=now_ms)
            if opp is not None:
                out.append(opp)
        return out

    # ---------------------------------------------------------
    # Main
    # ---------------------------------------------------------
    def scan(self, table: SourceTable, *, now_ms: Optional[int] = None) -> List[Opportunity]:
        now_ms = int(time.time() * 1000) if now_ms is None else int(now_ms)

        views = build_symbol_views(table, now_ms=now_ms)
        out: List[Opportunity] = []
        for view in views:
            out.extend(self.opportunities_for_view(view, now_ms=now_ms))

        out.sort(key=lambda o: o.net_profit, reverse=True)

        if self.logger is not None:
            self.logger.debug(
                f"[ENGINE] sources={len(table)} symbols(>=2 legs)={len(views)} opportunities={len(out)}"
            )
        return out
