from __future__ import annotations

"""Unified configuration loader (single source of truth = cfg.json).

This module intentionally stays thin:
- reads cfg.json (path can be overridden with FUNDING_MONITOR_CFG)
- lets secrets come from the environment / .env (WECHAT_WEBHOOK, TG_TOKEN, TG_CHAT_ID)
- normalizes types
- exposes runtime constants used by the codebase
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv

load_dotenv()

_CFG_PATH = Path(os.getenv("FUNDING_MONITOR_CFG") or (Path(__file__).resolve().parent / "cfg.json"))


# Exposed for startup diagnostics: which defaults were applied because cfg.json omitted a value.
CONFIG_DEFAULTS_USED: list[str] = []


def _note_default(name: str, value: Any) -> None:
    CONFIG_DEFAULTS_USED.append(f"{name}={value!r}")


def _load_cfg() -> Dict[str, Any]:
    if not _CFG_PATH.exists():
        raise FileNotFoundError(f"cfg.json not found: {_CFG_PATH}")
    with _CFG_PATH.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise RuntimeError("cfg.json root must be object")
    return data


_CFG: Dict[str, Any] = _load_cfg()


def _get(path: str, default: Any = None) -> Any:
    cur: Any = _CFG
    for part in path.split('.'):
        if not isinstance(cur, dict):
            return default
        cur = cur.get(part)
        if cur is None:
            return default
    return cur


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def _cfg_or_default(path: str, default: Any) -> Any:
    v = _get(path, None)
    if v is None:
        _note_default(path, default)
        return default
    return v


def _to_bool(v: Any, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        x = v.strip().lower()
        if x in {"1", "true", "yes", "y", "on"}:
            return True
        if x in {"0", "false", "no", "n", "off"}:
            return False
    return bool(default)


def _to_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _to_float(v: Any, default: float = 0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(default)


def _env(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or not v.strip():
        return None
    return v.strip()


# ============================================================
# CORE RUNTIME
# ============================================================
SCAN_INTERVAL_SEC = _to_float(_cfg_or_default("runtime.scan_interval_sec", 10), 10.0)
SCHEDULE_REFRESH_SEC = _to_float(_cfg_or_default("runtime.schedule_refresh_sec", 3600), 3600.0)
FETCH_TIMEOUT_SEC = _to_float(_cfg_or_default("runtime.fetch_timeout_sec", 8), 8.0)


# ============================================================
# EXCHANGES
# ============================================================
SUPPORTED_EXCHANGES: List[str] = ["binance", "okx", "bybit", "mexc", "bitget", "gate"]

_enabled_raw = _get("exchanges.enabled", None)
if _enabled_raw is None:
    _note_default("exchanges.enabled", SUPPORTED_EXCHANGES)
    _enabled_raw = list(SUPPORTED_EXCHANGES)
ENABLED_EXCHANGES: List[str] = [
    str(x).strip().lower()
    for x in (_enabled_raw or [])
    if str(x).strip()
]

DEFAULT_QUOTE = str(_cfg_or_default("exchanges.quote", "USDT") or "USDT").strip().upper() or "USDT"
MEXC_MIN_TURNOVER_24H = _to_float(_cfg_or_default("exchanges.mexc_min_turnover_24h", 1_000_000), 1_000_000.0)


# ============================================================
# ENGINE
# ============================================================
DEFAULT_THRESHOLD = 0.004  # 0.4%

_threshold = _to_float(_cfg_or_default("engine.threshold", DEFAULT_THRESHOLD), DEFAULT_THRESHOLD)
if _threshold <= 0:
    _note_default("engine.threshold", DEFAULT_THRESHOLD)
    _threshold = DEFAULT_THRESHOLD
PROFIT_THRESHOLD = _threshold


# ============================================================
# NOTIFICATIONS
# ============================================================
NOTIFY_TRANSPORT = str(_cfg_or_default("notifications.transport", "wechat") or "wechat").strip().lower()
WECHAT_WEBHOOK = str(_first(_env("WECHAT_WEBHOOK"), _get("notifications.wechat_webhook"), "") or "").strip()
COOLDOWN_SEC = _to_float(_cfg_or_default("notifications.cooldown_sec", 3600), 3600.0)
NOTIFY_TOP_N = _to_int(_cfg_or_default("notifications.top_n", 5), 5)
LEDGER_RETENTION_WINDOWS = _to_int(_cfg_or_default("notifications.ledger_retention_windows", 24), 24)


# ============================================================
# TELEGRAM
# ============================================================
TG_TOKEN = str(_first(_env("TG_TOKEN"), _get("telegram.token"), "") or "").strip()
TG_CHAT_ID = str(_first(_env("TG_CHAT_ID"), _get("telegram.chat_id"), "") or "").strip()

# Telegram rate-limit guard (anti-429 flood wait)
TG_MIN_SEND_INTERVAL_SEC = _to_float(_first(_get("telegram.min_send_interval_sec"), 1.0), 1.0)
TG_RETRY_MAX_ATTEMPTS = _to_int(_first(_get("telegram.retry_max_attempts"), 3), 3)
TG_RETRY_BACKOFF_PAD_SEC = _to_float(_first(_get("telegram.retry_backoff_pad_sec"), 0.5), 0.5)


# ============================================================
# LOGGING / DISPLAY / TIME
# ============================================================
LOG_DEBUG = _to_bool(_first(_get("logging.debug"), False), False)
LOG_INFO = _to_bool(_first(_get("logging.info"), True), True)
LOG_WARNING = _to_bool(_first(_get("logging.warning"), True), True)
LOG_ERROR = _to_bool(_first(_get("logging.error"), True), True)
MAX_LOG_LINES = _to_int(_first(_get("logging.max_log_lines"), 2000), 2000)
TIME_ZONE = str(_first(_get("logging.time_zone"), "Asia/Shanghai") or "Asia/Shanghai")
LOG_DIR = str(_first(_get("logging.dir"), "./logs") or "./logs")
