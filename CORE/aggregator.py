# ============================================================
# FILE: CORE/aggregator.py
# ROLE: Concurrent fan-out/fan-in over source adapters -> SourceTable
# ============================================================

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Sequence, Tuple

from CORE.models import ContractFact, SourceTable


class Aggregator:
    """One task per source, each bounded by its own timeout, joined at one barrier.

    A source that raises or times out is logged and left out of this cycle's
    table; the others are unaffected. A failed source is not retried inside a cycle.
    """

    def __init__(self, *, logger, fetch_timeout_sec: float = 8.0):
        self.logger = logger
        self.fetch_timeout_sec = float(fetch_timeout_sec)

    async def _guarded(self, src, step: str, fn: Callable[[], Awaitable[Any]]) -> Tuple[bool, Any]:
        t0 = time.monotonic()
        try:
            res = await asyncio.wait_for(fn(), timeout=self.fetch_timeout_sec)
        except asyncio.TimeoutError:
            self.logger.warning(f"[AGG] {src.name} {step} timed out after {self.fetch_timeout_sec:g}s")
            return False, None
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.warning(f"[AGG] {src.name} {step} failed: {e}")
            return False, None
        self.logger.debug(f"[AGG] {src.name} {step} ok in {time.monotonic() - t0:.2f}s")
        return True, res

    async def run(self, sources: Sequence) -> SourceTable:
        results = await asyncio.gather(*(self._guarded(s, "fetch", s.fetch) for s in sources))
        table: SourceTable = {}
        for src, (ok, facts) in zip(sources, results):
            if not ok:
                continue
            if not isinstance(facts, dict):
                self.logger.warning(f"[AGG] {src.name} fetch returned {type(facts).__name__}, expected dict")
                continue
            table[src.name] = {str(sym): f for sym, f in facts.items() if isinstance(f, ContractFact)}
        self.logger.debug(
            f"[AGG] cycle sources={len(table)}/{len(sources)} "
            + " ".join(f"{k}={len(v)}" for k, v in sorted(table.items()))
        )
        return table

    async def _prepare_one(self, src) -> bool:
        ok, _ = await self._guarded(src, "initialize", src.initialize)
        if not ok:
            return False
        ok, _ = await self._guarded(src, "refresh_schedule", src.refresh_schedule)
        return ok

    async def initialize_all(self, sources: Sequence) -> Dict[str, bool]:
        results = await asyncio.gather(*(self._prepare_one(s) for s in sources))
        out = {s.name: bool(ok) for s, ok in zip(sources, results)}
        self.logger.info(f"[AGG] initialized {sum(out.values())}/{len(out)} sources")
        return out

    async def refresh_schedules(self, sources: Sequence) -> Dict[str, bool]:
        results = await asyncio.gather(*(self._guarded(s, "refresh_schedule", s.refresh_schedule) for s in sources))
        out = {s.name: bool(ok) for s, (ok, _) in zip(sources, results)}
        failed: List[str] = [k for k, v in out.items() if not v]
        if failed:
            self.logger.warning(f"[SCHEDULE] refresh failed for {', '.join(failed)}; keeping previous intervals")
        else:
            self.logger.info(f"[SCHEDULE] refreshed {len(out)} sources")
        return out
