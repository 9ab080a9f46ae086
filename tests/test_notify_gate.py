"""Cooldown gate, top-N digest and delivery outcomes."""

import asyncio

import pytest

from conftest import NOW, FakeNotifier, make_opp

from CORE.dedup import CooldownLedger
from CORE.notify_gate import NotificationGate

COOLDOWN_MS = 3_600_000


@pytest.fixture
def ledger(logger):
    return CooldownLedger(cooldown_ms=COOLDOWN_MS, logger=logger)


def _gate(ledger, logger, notifier=None, top_n=5):
    return NotificationGate(ledger=ledger, notifier=notifier, top_n=top_n, threshold=0.004, logger=logger)


def test_second_cycle_within_cooldown_is_silent(ledger, logger):
    notifier = FakeNotifier()
    gate = _gate(ledger, logger, notifier)
    opps = [make_opp("BTCUSDT"), make_opp("ETHUSDT", net=0.008)]

    async def scenario():
        first = await gate.notify(opps, now_ms=NOW)
        second = await gate.notify(opps, now_ms=NOW + 10_000)
        return first, second

    first, second = asyncio.run(scenario())
    assert [o.symbol for o in first] == ["BTCUSDT", "ETHUSDT"]
    assert second == []
    assert len(notifier.sent) == 1
    assert "within cooldown" in logger.text("info")


def test_eligible_again_once_cooldown_elapsed(ledger, logger):
    gate = _gate(ledger, logger)
    opp = make_opp()
    assert gate.gate([opp], now_ms=NOW) == [opp]
    assert gate.gate([opp], now_ms=NOW + COOLDOWN_MS - 1) == []
    assert gate.gate([opp], now_ms=NOW + COOLDOWN_MS) == [opp]


def test_only_top_n_are_stamped(ledger, logger):
    gate = _gate(ledger, logger, top_n=2)
    opps = [make_opp("AAAUSDT", net=0.03), make_opp("BBBUSDT", net=0.02), make_opp("CCCUSDT", net=0.01)]

    first = gate.gate(opps, now_ms=NOW)
    assert [o.symbol for o in first] == ["AAAUSDT", "BBBUSDT"]
    assert gate.last_eligible_count == 3
    assert ledger.last_notified(("CCCUSDT", "Binance", "OKX")) is None

    second = gate.gate(opps, now_ms=NOW + 1)
    assert [o.symbol for o in second] == ["CCCUSDT"]


def test_key_is_direction_sensitive(ledger, logger):
    gate = _gate(ledger, logger)
    gate.gate([make_opp(high="Binance", low="OKX")], now_ms=NOW)
    reverse = make_opp(high="OKX", low="Binance")
    assert gate.gate([reverse], now_ms=NOW + 1) == [reverse]


def test_same_key_twice_in_one_cycle_counts_once(ledger, logger):
    gate = _gate(ledger, logger)
    a = make_opp(net=0.02, target_ms=NOW + 3_600_000)
    b = make_opp(net=0.01, target_ms=NOW + 8 * 3_600_000)
    assert gate.gate([a, b], now_ms=NOW) == [a]


def test_failed_delivery_keeps_the_stamp(ledger, logger):
    notifier = FakeNotifier(fail=True)
    gate = _gate(ledger, logger, notifier)
    opp = make_opp()

    async def scenario():
        first = await gate.notify([opp], now_ms=NOW)
        second = await gate.notify([opp], now_ms=NOW + 1)
        return first, second

    first, second = asyncio.run(scenario())
    assert first == [opp]
    assert second == []
    assert len(notifier.sent) == 1
    assert "delivery failed" in logger.text("warning")
    assert ledger.last_notified(opp.dedup_key) == NOW


def test_detection_only_mode_logs_digest(ledger, logger):
    gate = _gate(ledger, logger, notifier=None)
    opp = make_opp()

    sent = asyncio.run(gate.notify([opp], now_ms=NOW))
    assert sent == [opp]
    assert "Found 1 arbitrage opportunities" in logger.text("info")
    assert "【BTCUSDT】" in logger.text("info")
    # bookkeeping still runs
    assert ledger.last_notified(opp.dedup_key) == NOW


def test_digest_header_counts_all_eligible(ledger, logger):
    notifier = FakeNotifier()
    gate = _gate(ledger, logger, notifier, top_n=1)
    opps = [make_opp("AAAUSDT", net=0.02), make_opp("BBBUSDT", net=0.01)]

    asyncio.run(gate.notify(opps, now_ms=NOW))
    (text,) = notifier.sent
    assert text.startswith("🔔 Found 2 arbitrage opportunities")
    assert "【AAAUSDT】" in text
    assert "【BBBUSDT】" not in text


def test_empty_input_does_nothing(ledger, logger):
    notifier = FakeNotifier()
    gate = _gate(ledger, logger, notifier)
    assert asyncio.run(gate.notify([], now_ms=NOW)) == []
    assert notifier.sent == []
