"""Fan-out/fan-in over sources with per-source failure isolation."""

import asyncio

from conftest import FakeSource, fact

from CORE.aggregator import Aggregator


def test_failing_and_slow_sources_are_absent(logger):
    ok = FakeSource("Binance", {"BTCUSDT": fact()})
    broken = FakeSource("OKX", fail=True)
    slow = FakeSource("Gate", {"BTCUSDT": fact()}, delay=1.0)
    agg = Aggregator(logger=logger, fetch_timeout_sec=0.05)

    table = asyncio.run(agg.run([ok, broken, slow]))

    assert list(table) == ["Binance"]
    assert list(table["Binance"]) == ["BTCUSDT"]
    warnings = logger.text("warning")
    assert "OKX fetch failed" in warnings
    assert "Gate fetch timed out" in warnings


def test_every_source_fetched_once_per_cycle(logger):
    sources = [FakeSource(n, {"X": fact("X")}) for n in ("A", "B", "C")]
    table = asyncio.run(Aggregator(logger=logger).run(sources))
    assert sorted(table) == ["A", "B", "C"]
    assert all(s.calls["fetch"] == 1 for s in sources)


def test_non_dict_payload_is_dropped(logger):
    class ListSource(FakeSource):
        async def fetch(self):
            return ["not", "a", "dict"]

    table = asyncio.run(Aggregator(logger=logger).run([ListSource("Bybit"), FakeSource("MEXC", {"X": fact("X")})]))
    assert list(table) == ["MEXC"]


def test_initialize_all_reports_per_source(logger):
    good = FakeSource("Binance")
    bad_init = FakeSource("OKX", fail_init=True)
    res = asyncio.run(Aggregator(logger=logger).initialize_all([good, bad_init]))

    assert res == {"Binance": True, "OKX": False}
    assert good.calls["refresh_schedule"] == 1
    # schedule refresh is skipped after a failed initialize
    assert bad_init.calls["refresh_schedule"] == 0


def test_refresh_schedules_never_raises(logger):
    res = asyncio.run(Aggregator(logger=logger).refresh_schedules([FakeSource("A"), FakeSource("B", fail=True)]))
    assert res == {"A": True, "B": False}
    assert "refresh failed for B" in logger.text("warning")
