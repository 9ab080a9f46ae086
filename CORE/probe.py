# ============================================================
# FILE: CORE/probe.py
# ROLE: One-shot connectivity probes (`main.py --test`, `--test-notify`)
# ============================================================

from __future__ import annotations

from typing import Dict, List, Sequence

from c_utils import Utils, now
from CORE.models import ContractFact

PROBE_ROWS = 10


def format_fact_rows(facts: Dict[str, ContractFact], limit: int = PROBE_ROWS) -> List[str]:
    """Fixed-width table of the first `limit` symbols (alphabetical)."""
    lines = [
        f"{'SYMBOL':<14} | {'PRICE':>14} | {'RATE':>11} | {'INTERVAL':>8} | {'NEXT SETTLEMENT':<19}"
    ]
    for sym in sorted(facts)[: max(0, int(limit))]:
        f = facts[sym]
        lines.append(
            f"{sym:<14} | {Utils.fmt_price(f.price):>14} | {f.funding_rate * 100:>10.4f}% | "
            f"{f.funding_interval_hours:>7.2f}h | {Utils.milliseconds_to_datetime(f.next_settlement_time_ms):<19}"
        )
    return lines


async def probe_source(src, logger, limit: int = PROBE_ROWS) -> bool:
    """initialize -> refresh_schedule -> fetch on one adapter; stops at the first failing step."""
    logger.info(f"========== {src.name} ==========")
    steps = (
        ("initialize", src.initialize),
        ("refresh_schedule", src.refresh_schedule),
    )
    for step, fn in steps:
        try:
            await fn()
        except Exception as e:
            logger.error(f"[PROBE] {src.name} {step} failed: {e}")
            return False
        logger.info(f"[PROBE] {src.name} {step} OK")

    try:
        facts = await src.fetch()
    except Exception as e:
        logger.error(f"[PROBE] {src.name} fetch failed: {e}")
        return False

    stale = sum(1 for f in facts.values() if f.next_settlement_time_ms <= now())
    logger.info(f"[PROBE] {src.name} fetch OK: {len(facts)} contracts ({stale} without future settlement)")
    if not facts:
        logger.warning(f"[PROBE] {src.name} returned no contracts")
        return False
    for line in format_fact_rows(facts, limit=limit):
        logger.info(line)
    return True


async def run_probe(sources: Sequence, logger) -> Dict[str, bool]:
    """Probe adapters one after another (readable output), then close them."""
    out: Dict[str, bool] = {}
    try:
        for src in sources:
            out[src.name] = await probe_source(src, logger)
    finally:
        for src in sources:
            await src.shutdown()
    ok = [k for k, v in out.items() if v]
    bad = [k for k, v in out.items() if not v]
    logger.info(f"[PROBE] done: ok={ok or '-'} failed={bad or '-'}")
    return out


async def probe_notifier(notifier, logger) -> bool:
    if notifier is None:
        logger.error("[PROBE] no notification transport configured")
        return False
    text = (
        "🔔 Test message\n\n"
        "Funding monitor notification check.\n"
        f"Time: {Utils.milliseconds_to_datetime(now())}"
    )
    try:
        await notifier.deliver(text)
    except Exception as e:
        logger.error(f"[PROBE] test message failed: {e}")
        return False
    finally:
        await notifier.close()
    logger.info("[PROBE] test message delivered")
    return True
