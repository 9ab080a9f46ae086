"""
Shared fixtures and fakes for the funding monitor test suite.

Run with: python -m pytest tests/ -v
"""

import asyncio
from functools import wraps

import pytest

from CORE.models import ContractFact, Opportunity

H = 3_600_000
NOW = 1_700_000_000_000


class FakeLogger:
    """Collects messages per level instead of printing/writing files."""

    def __init__(self):
        self.records = {"debug": [], "info": [], "warning": [], "error": [], "exception": []}

    def debug(self, msg, *a, **kw):
        self.records["debug"].append(str(msg))

    def info(self, msg, *a, **kw):
        self.records["info"].append(str(msg))

    def warning(self, msg, *a, **kw):
        self.records["warning"].append(str(msg))

    def error(self, msg, *a, **kw):
        self.records["error"].append(str(msg))

    def exception(self, msg, *a, **kw):
        self.records["exception"].append(str(msg))

    def total_exception_decor(self, func, context=None):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as ex:
                self.records["exception"].append(f"{context}: {ex}")
                return None

        return wrapper

    def text(self, level):
        return "\n".join(self.records[level])


class FakeNotifier:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self.closed = False

    async def deliver(self, text):
        self.sent.append(text)
        if self.fail:
            raise RuntimeError("webhook down")

    async def close(self):
        self.closed = True


class FakeSource:
    """Source adapter double: canned facts, optional failure or delay."""

    def __init__(self, name, facts=None, *, fail=False, delay=0.0, fail_init=False):
        self.name = name
        self.facts = dict(facts or {})
        self.fail = fail
        self.delay = delay
        self.fail_init = fail_init
        self.calls = {"initialize": 0, "refresh_schedule": 0, "fetch": 0, "shutdown": 0}

    async def initialize(self):
        self.calls["initialize"] += 1
        if self.fail_init:
            raise RuntimeError(f"{self.name} init boom")

    async def refresh_schedule(self):
        self.calls["refresh_schedule"] += 1
        if self.fail:
            raise RuntimeError(f"{self.name} schedule boom")

    async def fetch(self):
        self.calls["fetch"] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError(f"{self.name} fetch boom")
        return dict(self.facts)

    async def shutdown(self):
        self.calls["shutdown"] += 1


def fact(symbol="BTCUSDT", *, price=100.0, rate=0.0001, interval=8.0, next_ms=NOW + H):
    return ContractFact(
        symbol=symbol,
        price=price,
        funding_rate=rate,
        funding_interval_hours=interval,
        next_settlement_time_ms=next_ms,
    )


def make_opp(symbol="BTCUSDT", high="Binance", low="OKX", net=0.01, *, target_ms=NOW + H, ts_ms=NOW):
    return Opportunity(
        ts_ms=ts_ms,
        symbol=symbol,
        high_source=high,
        low_source=low,
        high_rate=net,
        low_rate=0.0,
        high_accumulated_rate=net,
        low_accumulated_rate=0.0,
        high_settlements=1,
        low_settlements=0,
        high_price=100.0,
        low_price=100.0,
        high_interval_hours=8.0,
        low_interval_hours=8.0,
        price_spread=0.0,
        net_profit=net,
        target_time_ms=target_ms,
        time_to_target_hours=(target_ms - ts_ms) / H,
    )


@pytest.fixture
def logger():
    return FakeLogger()
