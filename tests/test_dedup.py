"""Cooldown ledger bookkeeping."""

import pytest

from CORE.dedup import CooldownLedger

KEY = ("BTCUSDT", "Binance", "OKX")


def test_rejects_non_positive_cooldown():
    with pytest.raises(ValueError):
        CooldownLedger(cooldown_ms=0)


def test_is_cooling_window():
    ledger = CooldownLedger(cooldown_ms=1000)
    assert ledger.is_cooling(KEY, now_ms=0) is False
    ledger.mark(KEY, now_ms=0)
    assert ledger.is_cooling(KEY, now_ms=999) is True
    assert ledger.is_cooling(KEY, now_ms=1000) is False


def test_prune_drops_only_entries_past_retention():
    ledger = CooldownLedger(cooldown_ms=1000, retention_windows=2)
    ledger.mark(KEY, now_ms=0)
    ledger.mark(("ETHUSDT", "Gate", "MEXC"), now_ms=1500)

    assert ledger.prune(now_ms=2000) == 0
    assert len(ledger) == 2

    assert ledger.prune(now_ms=2001) == 1
    assert ledger.last_notified(KEY) is None
    assert len(ledger) == 1
