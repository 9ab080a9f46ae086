"""End-to-end cycles of the monitor with fake sources and transport."""

import asyncio

import pytest

from conftest import H, FakeNotifier, FakeSource, fact

from c_utils import now
from CORE.bot import FundingArbMonitor


def _sources():
    t = now()
    return [
        FakeSource("Binance", {"BTCUSDT": fact(rate=0.002, interval=1, next_ms=t + H, price=100.0)}),
        FakeSource("OKX", {"BTCUSDT": fact(rate=-0.001, interval=8, next_ms=t + 8 * H, price=100.5)}),
        FakeSource("Gate", fail=True),
    ]


def _monitor(logger, sources, notifier):
    return FundingArbMonitor(
        logger,
        sources=sources,
        notifier=notifier,
        run_self_check=False,
        threshold=0.004,
        cooldown_sec=3600,
        top_n=5,
    )


def test_cycle_notifies_once_then_cools_down(logger):
    notifier = FakeNotifier()
    m = _monitor(logger, _sources(), notifier)

    async def scenario():
        first = await m.run_cycle()
        second = await m.run_cycle()
        return first, second

    first, second = asyncio.run(scenario())
    assert len(first) == 1
    o = first[0]
    assert (o.symbol, o.high_source, o.low_source) == ("BTCUSDT", "Binance", "OKX")
    assert o.net_profit == pytest.approx(0.012)
    assert second == []
    assert len(notifier.sent) == 1
    assert "Gate fetch failed" in logger.text("warning")
    assert m.cycles == 2


def test_detection_only_when_no_transport(logger):
    m = FundingArbMonitor(
        logger,
        sources=_sources(),
        notifier=None,
        use_config_notifier=False,
        run_self_check=False,
    )
    sent = asyncio.run(m.run_cycle())
    assert m.notifier is None
    assert len(sent) == 1
    assert "detection-only" in logger.text("info")


def test_needs_two_sources(logger):
    with pytest.raises(RuntimeError):
        _monitor(logger, [FakeSource("Binance")], FakeNotifier())


def test_cycle_errors_do_not_escape(logger):
    m = _monitor(logger, [FakeSource("Binance"), FakeSource("OKX")], FakeNotifier())

    def broken_scan(*a, **kw):
        raise ValueError("bad table")

    m.engine.scan = broken_scan
    assert asyncio.run(m.run_cycle()) is None
    assert "bad table" in "\n".join(logger.records["exception"])


def test_run_forever_initializes_and_shuts_down(logger):
    sources = _sources()
    notifier = FakeNotifier()
    m = _monitor(logger, sources, notifier)

    async def scenario():
        task = asyncio.create_task(m.run_forever())
        await asyncio.sleep(0.1)
        m.stop()
        await asyncio.wait_for(task, timeout=2.0)

    asyncio.run(scenario())
    assert all(s.calls["initialize"] == 1 for s in sources)
    assert all(s.calls["fetch"] >= 1 for s in sources)
    assert all(s.calls["shutdown"] == 1 for s in sources)
    assert notifier.closed
    assert len(notifier.sent) == 1
