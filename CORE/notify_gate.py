# ============================================================
# FILE: CORE/notify_gate.py
# ROLE: Cooldown gate + digest delivery for ranked opportunities.
# ============================================================

from __future__ import annotations

import time
from typing import List, Optional, Sequence, Set

from CORE.dedup import CooldownLedger, LedgerKey
from CORE.models import Opportunity
from NOTIFY.messages import build_digest_message


class NotificationGate:
    """Per (symbol, high_source, low_source) rate limiter in front of the notifier.

    Contract:
      - input is the ranked opportunity list of one cycle (best first)
      - a key is eligible when it was never stamped or its stamp is >= cooldown old
      - only the first ``top_n`` eligible are delivered and stamped; stamping
        happens before delivery and is not rolled back on transport errors
      - notifier=None => detection-only: digest goes to the log
    """

    def __init__(
        self,
        *,
        ledger: CooldownLedger,
        notifier=None,
        top_n: int = 5,
        threshold: float = 0.004,
        logger=None,
    ):
        self.ledger = ledger
        self.notifier = notifier
        self.top_n = max(1, int(top_n))
        self.threshold = float(threshold)
        self.logger = logger
        self.last_eligible_count = 0

    def _log(self, level: str, msg: str) -> None:
        if self.logger is None:
            return
        getattr(self.logger, level)(msg)

    def _eligible_locked(self, opportunities: Sequence[Opportunity], now_ms: int) -> List[Opportunity]:
        out: List[Opportunity] = []
        seen: Set[LedgerKey] = set()
        for opp in opportunities:
            key = opp.dedup_key
            # same pair at a later instant in the same cycle is a duplicate
            if key in seen:
                continue
            seen.add(key)
            if self.ledger.is_cooling(key, now_ms=now_ms):
                continue
            out.append(opp)
        return out

    def gate(self, opportunities: Sequence[Opportunity], *, now_ms: Optional[int] = None) -> List[Opportunity]:
        """Return the opportunities to deliver this cycle and stamp their keys."""
        now_ms = int(time.time() * 1000) if now_ms is None else int(now_ms)
        with self.ledger.lock:
            self.ledger.prune(now_ms=now_ms)
            eligible = self._eligible_locked(opportunities, now_ms)
            selected = eligible[: self.top_n]
            for opp in selected:
                self.ledger.mark(opp.dedup_key, now_ms=now_ms)
        self.last_eligible_count = len(eligible)
        return selected

    async def notify(self, opportunities: Sequence[Opportunity], *, now_ms: Optional[int] = None) -> List[Opportunity]:
        if not opportunities:
            return []

        selected = self.gate(opportunities, now_ms=now_ms)
        if not selected:
            self._log("info", f"[GATE] {len(opportunities)} opportunities all within cooldown, skip notify")
            return []

        text = build_digest_message(
            selected,
            total_eligible=self.last_eligible_count,
            threshold=self.threshold,
        )

        if self.notifier is None:
            self._log("info", f"[NOTIFY] detection-only mode, digest not delivered:\n{text}")
            return selected

        try:
            await self.notifier.deliver(text)
            self._log("info", f"[NOTIFY] digest delivered: {len(selected)}/{self.last_eligible_count} opportunities")
        except Exception as e:
            self._log("warning", f"[NOTIFY] delivery failed ({type(e).__name__}): {e}")
        return selected
