# ============================================================
# FILE: c_utils.py
# ROLE: Small helper utilities (time, safe casting, formatting)
# ============================================================

from __future__ import annotations

import math
import time
from datetime import datetime
from typing import Any, Optional

from c_log import TZ


def now() -> int:
    """Return current timestamp in milliseconds."""
    return int(time.time() * 1000)


class Utils:
    @staticmethod
    def safe_float(value: Any, default: float = 0.0) -> float:
        try:
            x = float(value)
        except (TypeError, ValueError):
            return default
        return x if math.isfinite(x) else default

    @staticmethod
    def safe_int(value: Any, default: int = 0) -> int:
        # exchanges send epoch ms both as numbers and as strings ("1700000000000")
        try:
            return int(value)
        except (TypeError, ValueError):
            pass
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default

    @staticmethod
    def milliseconds_to_datetime(milliseconds: Any, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        if milliseconds is None:
            return "N/A"
        try:
            ms = int(milliseconds)
            if ms <= 0:
                return "N/A"
        except (ValueError, TypeError):
            return "N/A"

        dt = datetime.fromtimestamp(ms / 1000, TZ)
        return dt.strftime(fmt)

    @staticmethod
    def format_duration(ms: Optional[int]) -> str:
        if ms is None:
            return ""

        total_seconds = int(ms) // 1000
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        if hours > 0:
            return f"{hours}h"
        if minutes > 0 and seconds > 0:
            return f"{minutes}m {seconds}s"
        if minutes > 0:
            return f"{minutes}m"
        return f"{seconds}s"

    @staticmethod
    def fmt_price(value: Any) -> str:
        try:
            x = float(value)
        except (TypeError, ValueError):
            return str(value)
        if not math.isfinite(x):
            return str(value)
        # No fixed precision for price (avoid damaging tiny-price assets).
        s = format(x, ".10g")
        if "e" in s or "E" in s:
            s = format(x, ".18f").rstrip("0").rstrip(".")
        return s or "0"
