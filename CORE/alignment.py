# ============================================================
# FILE: CORE/alignment.py
# ROLE: Settlement alignment: project every source's accumulated funding
#       to each distinct future settlement instant of a symbol.
# ============================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from CORE.arb_math import ArbMath
from CORE.models import ContractFact, SourceTable


@dataclass(frozen=True)
class SymbolView:
    """One symbol's qualifying (source, fact) pairs for the current cycle."""

    symbol: str
    legs: Tuple[Tuple[str, ContractFact], ...]


@dataclass(frozen=True)
class RateProjection:
    """One source's accumulated funding at a target instant."""

    source: str
    fact: ContractFact
    accumulated_rate: float
    settlements: int


def build_symbol_views(table: SourceTable, *, now_ms: int) -> List[SymbolView]:
    """Pivot source -> symbol -> fact into per-symbol views.

    Only valid facts whose next settlement is still in the future qualify;
    symbols with fewer than 2 qualifying sources are dropped.
    """
    by_symbol: Dict[str, List[Tuple[str, ContractFact]]] = {}
    for source in sorted(table.keys()):
        for symbol, fact in (table.get(source) or {}).items():
            if fact is None or not fact.is_valid:
                continue
            if int(fact.next_settlement_time_ms) <= int(now_ms):
                continue
            by_symbol.setdefault(symbol, []).append((source, fact))

    out: List[SymbolView] = []
    for symbol in sorted(by_symbol.keys()):
        legs = by_symbol[symbol]
        if len(legs) < 2:
            continue
        out.append(SymbolView(symbol=symbol, legs=tuple(legs)))
    return out


def candidate_targets(view: SymbolView) -> List[int]:
    """Distinct next-settlement instants of the view, ascending."""
    return sorted({int(f.next_settlement_time_ms) for _, f in view.legs})


def project_at(view: SymbolView, target_ms: int) -> List[RateProjection]:
    out: List[RateProjection] = []
    for source, fact in view.legs:
        n = ArbMath.calc_settlements_count(
            next_settlement_ms=fact.next_settlement_time_ms,
            interval_hours=fact.funding_interval_hours,
            target_ms=target_ms,
        )
        out.append(
            RateProjection(
                source=source,
                fact=fact,
                accumulated_rate=ArbMath.calc_accumulated_rate(funding_rate=fact.funding_rate, settlements=n),
                settlements=n,
            )
        )
    return out


def align(view: SymbolView, *, now_ms: int) -> Iterator[Tuple[int, List[RateProjection]]]:
    """Yield (target_ms, projections) for every candidate instant still in the future."""
    for target_ms in candidate_targets(view):
        if target_ms <= int(now_ms):
            continue
        yield target_ms, project_at(view, target_ms)
