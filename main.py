# ============================================================
# FILE: main.py
# ROLE: Entry point
# ============================================================

import argparse
import asyncio
import sys

from const import DEFAULT_QUOTE, ENABLED_EXCHANGES, FETCH_TIMEOUT_SEC, MEXC_MIN_TURNOVER_24H
from c_log import UnifiedLogger

from API import build_clients
from CORE.bot import FundingArbMonitor
from CORE.probe import probe_notifier, run_probe
from NOTIFY import build_notifier


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Cross-exchange funding rate arbitrage monitor")
    p.add_argument("--test", action="store_true", help="probe every enabled exchange once and exit")
    p.add_argument("--test-notify", action="store_true", help="send one test message via the configured transport and exit")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    logger = UnifiedLogger(name="core", context="MAIN")

    try:
        if args.test:
            sources = build_clients(
                ENABLED_EXCHANGES,
                logger=logger,
                quote=DEFAULT_QUOTE,
                timeout_sec=FETCH_TIMEOUT_SEC,
                mexc_min_turnover_24h=MEXC_MIN_TURNOVER_24H,
            )
            res = asyncio.run(run_probe(sources, logger))
            return 0 if res and all(res.values()) else 1

        if args.test_notify:
            ok = asyncio.run(probe_notifier(build_notifier(logger), logger))
            return 0 if ok else 1

        monitor = FundingArbMonitor(logger=logger)
        asyncio.run(monitor.run_forever())
    except KeyboardInterrupt:
        logger.info("[APP] stopped by user")
    except Exception as e:
        logger.error(f"[APP] startup/runtime fatal: {e}")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
