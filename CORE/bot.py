# ============================================================
# FILE: CORE/bot.py
# ROLE: Main orchestrator (aggregate -> align/rank -> gate -> notify), periodic driver
# ============================================================

from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence

from const import (
    COOLDOWN_SEC,
    DEFAULT_QUOTE,
    ENABLED_EXCHANGES,
    FETCH_TIMEOUT_SEC,
    LEDGER_RETENTION_WINDOWS,
    MEXC_MIN_TURNOVER_24H,
    NOTIFY_TOP_N,
    PROFIT_THRESHOLD,
    SCAN_INTERVAL_SEC,
    SCHEDULE_REFRESH_SEC,
)

from c_log import UnifiedLogger
from c_utils import now

from API import build_clients
from NOTIFY import build_notifier

from CORE.aggregator import Aggregator
from CORE.dedup import CooldownLedger
from CORE.funding_engine import FundingEngine
from CORE.models import Opportunity
from CORE.notify_gate import NotificationGate
from CORE.startup_checks import StartupSelfCheck


class FundingArbMonitor:
    """Funding arbitrage *monitor*.

    Pipeline (one cycle, every scan_interval_sec):
      1) fetch every source concurrently -> SourceTable
      2) align each symbol at its settlement instants, rank by net profit
      3) cooldown gate, top-N digest, deliver (or log when no transport)

    Schedule caches are refreshed every schedule_refresh_sec on a separate timer.

    Notes:
      - We do NOT trade here. Only detection + notifications.
      - Sources and notifier can be injected (tests, probes); by default they come from cfg.json.
    """

    def __init__(
        self,
        logger: Optional[UnifiedLogger] = None,
        *,
        sources: Optional[Sequence] = None,
        notifier=None,
        use_config_notifier: bool = True,
        run_self_check: bool = True,
        scan_interval_sec: float = SCAN_INTERVAL_SEC,
        schedule_refresh_sec: float = SCHEDULE_REFRESH_SEC,
        threshold: float = PROFIT_THRESHOLD,
        cooldown_sec: float = COOLDOWN_SEC,
        top_n: int = NOTIFY_TOP_N,
    ):
        self.logger = logger or UnifiedLogger(name="core", context="MONITOR")

        if run_self_check:
            report = StartupSelfCheck(self.logger).run()
            if not report.ok:
                raise RuntimeError("Startup self-check failed. Fix config/runtime issues in logs and restart.")

        if sources is None:
            sources = build_clients(
                ENABLED_EXCHANGES,
                logger=self.logger,
                quote=DEFAULT_QUOTE,
                timeout_sec=FETCH_TIMEOUT_SEC,
                mexc_min_turnover_24h=MEXC_MIN_TURNOVER_24H,
            )
        self.sources = list(sources)
        if len(self.sources) < 2:
            raise RuntimeError(f"need at least 2 sources, got {len(self.sources)}")

        if notifier is None and use_config_notifier:
            notifier = build_notifier(self.logger)
        self.notifier = notifier

        self.scan_interval_sec = max(0.5, float(scan_interval_sec))
        self.schedule_refresh_sec = max(self.scan_interval_sec, float(schedule_refresh_sec))

        self.aggregator = Aggregator(logger=self.logger, fetch_timeout_sec=FETCH_TIMEOUT_SEC)
        self.engine = FundingEngine(threshold=threshold, logger=self.logger)
        self.ledger = CooldownLedger(
            cooldown_ms=int(float(cooldown_sec) * 1000),
            retention_windows=LEDGER_RETENTION_WINDOWS,
            logger=self.logger,
        )
        self.gate = NotificationGate(
            ledger=self.ledger,
            notifier=self.notifier,
            top_n=top_n,
            threshold=threshold,
            logger=self.logger,
        )

        self._stop = asyncio.Event()
        self.cycles = 0

        # periodic steps must never kill the loop
        self.run_cycle = self.logger.total_exception_decor(self.run_cycle, context="CYCLE")
        self.refresh_schedules = self.logger.total_exception_decor(self.refresh_schedules, context="SCHEDULE")

    # ---------------------------------------------------------
    # STEPS
    # ---------------------------------------------------------
    async def run_cycle(self) -> List[Opportunity]:
        t0 = time.monotonic()
        table = await self.aggregator.run(self.sources)
        now_ms = now()
        opps = self.engine.scan(table, now_ms=now_ms)
        sent = await self.gate.notify(opps, now_ms=now_ms)
        self.cycles += 1
        self.logger.info(
            f"[APP] cycle #{self.cycles}: sources={len(table)}/{len(self.sources)} "
            f"opportunities={len(opps)} notified={len(sent)} in {time.monotonic() - t0:.2f}s"
        )
        return sent

    async def refresh_schedules(self) -> None:
        await self.aggregator.refresh_schedules(self.sources)

    def stop(self) -> None:
        self._stop.set()

    # ---------------------------------------------------------
    # MAIN LOOP
    # ---------------------------------------------------------
    async def _sleep_until(self, deadline: float) -> None:
        delay = deadline - time.monotonic()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    async def run_forever(self) -> None:
        try:
            names = ", ".join(s.name for s in self.sources)
            self.logger.info(
                f"[APP] starting: sources={names} scan={self.scan_interval_sec:g}s "
                f"refresh={self.schedule_refresh_sec:g}s threshold={self.engine.threshold * 100:.2f}% "
                f"transport={'on' if self.notifier is not None else 'off (detection-only)'}"
            )
            await self.aggregator.initialize_all(self.sources)

            await self.run_cycle()
            t = time.monotonic()
            next_scan = t + self.scan_interval_sec
            next_refresh = t + self.schedule_refresh_sec

            while not self._stop.is_set():
                await self._sleep_until(min(next_scan, next_refresh))
                if self._stop.is_set():
                    break

                t = time.monotonic()
                if t >= next_refresh:
                    await self.refresh_schedules()
                    next_refresh = t + self.schedule_refresh_sec
                if t >= next_scan:
                    await self.run_cycle()
                    # a slow cycle skips missed ticks instead of bursting
                    next_scan = max(next_scan + self.scan_interval_sec, time.monotonic())
        finally:
            await self._shutdown()

    async def _shutdown(self) -> None:
        self.logger.info("[APP] shutting down")
        for src in self.sources:
            shutdown = getattr(src, "shutdown", None)
            if shutdown is None:
                continue
            try:
                await shutdown()
            except Exception as e:
                self.logger.warning(f"[APP] {src.name} shutdown failed: {e}")
        close = getattr(self.notifier, "close", None)
        if close is not None:
            try:
                await close()
            except Exception as e:
                self.logger.warning(f"[APP] notifier close failed: {e}")
