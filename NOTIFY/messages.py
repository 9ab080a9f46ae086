# ============================================================
# FILE: NOTIFY/messages.py
# ROLE: Digest text builders (formatting only)
# ============================================================

from __future__ import annotations

from typing import Callable, Optional, Sequence

from c_utils import Utils
from CORE.models import Opportunity


def _fmt_target(ms: int) -> str:
    return Utils.milliseconds_to_datetime(ms, fmt="%m-%d %H:%M")


def _leg_line(label: str, ex: str, rate: float, settlements: int, accumulated: float, interval_h: float) -> str:
    if settlements <= 0:
        return f"{label}: {ex} 0% (not settled) [{interval_h:g}h]"
    return (
        f"{label}: {ex} {rate * 100:+.4f}% × {settlements} = {accumulated * 100:+.4f}% [{interval_h:g}h]"
    )


def build_opportunity_block(opp: Opportunity, *, threshold: float, fmt_dt: Callable[[int], str] = _fmt_target) -> str:
    lines: list[str] = []
    lines.append(f"【{opp.symbol}】")
    lines.append(f"Target: {fmt_dt(opp.target_time_ms)} (in {opp.time_to_target_hours:.2f}h)")
    lines.append(f"Net profit: {opp.net_profit * 100:.4f}% (threshold {threshold * 100:.2f}%)")
    lines.append(_leg_line("High", opp.high_source, opp.high_rate, opp.high_settlements, opp.high_accumulated_rate, opp.high_interval_hours))
    lines.append(_leg_line("Low", opp.low_source, opp.low_rate, opp.low_settlements, opp.low_accumulated_rate, opp.low_interval_hours))
    lines.append(f"Price spread: {opp.price_spread * 100:+.4f}%")
    lines.append(f"Prices: {Utils.fmt_price(opp.high_price)} / {Utils.fmt_price(opp.low_price)}")
    return "\n".join(lines)


def build_digest_message(
    opportunities: Sequence[Opportunity],
    *,
    total_eligible: Optional[int] = None,
    threshold: float,
    fmt_dt: Callable[[int], str] = _fmt_target,
) -> str:
    total = len(opportunities) if total_eligible is None else int(total_eligible)
    blocks = [f"🔔 Found {total} arbitrage opportunities"]
    for opp in opportunities:
        blocks.append(build_opportunity_block(opp, threshold=threshold, fmt_dt=fmt_dt))
    return "\n\n".join(blocks)
