# ============================================================
# FILE: CORE/dedup.py
# ROLE: Notification cooldown ledger (avoid spam)
# ============================================================

from __future__ import annotations

import threading
from typing import Dict, Optional, Tuple

LedgerKey = Tuple[str, str, str]  # (symbol, high_source, low_source)


class CooldownLedger:
    """In-memory key -> last_notified_at_ms.

    Not persisted: resets on restart.
    Entries older than ``retention_windows`` cooldown windows are pruned,
    they are already past cooldown so dedup results do not change.
    """

    def __init__(self, *, cooldown_ms: int, retention_windows: int = 24, logger=None):
        if int(cooldown_ms) <= 0:
            raise ValueError("cooldown_ms must be > 0")
        self.cooldown_ms = int(cooldown_ms)
        self.retention_windows = max(1, int(retention_windows))
        self.logger = logger
        self._items: Dict[LedgerKey, int] = {}
        # held by NotificationGate for a whole check-and-stamp pass
        self.lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._items)

    def last_notified(self, key: LedgerKey) -> Optional[int]:
        return self._items.get(key)

    def is_cooling(self, key: LedgerKey, *, now_ms: int) -> bool:
        last = self._items.get(key)
        if last is None:
            return False
        return int(now_ms) - int(last) < self.cooldown_ms

    def mark(self, key: LedgerKey, *, now_ms: int) -> None:
        self._items[key] = int(now_ms)

    def prune(self, *, now_ms: int) -> int:
        horizon = int(now_ms) - self.cooldown_ms * self.retention_windows
        drop = [k for k, ts in self._items.items() if ts < horizon]
        for k in drop:
            self._items.pop(k, None)
        if drop and self.logger is not None:
            self.logger.debug(f"[DEDUP] pruned {len(drop)} stale keys, kept={len(self._items)}")
        return len(drop)
