# ============================================================
# FILE: CORE/startup_checks.py
# ROLE: Startup config/runtime self-checks (best-effort validation)
# ============================================================

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from const import (
    CONFIG_DEFAULTS_USED,
    COOLDOWN_SEC,
    ENABLED_EXCHANGES,
    FETCH_TIMEOUT_SEC,
    LEDGER_RETENTION_WINDOWS,
    LOG_DIR,
    NOTIFY_TOP_N,
    NOTIFY_TRANSPORT,
    PROFIT_THRESHOLD,
    SCAN_INTERVAL_SEC,
    SCHEDULE_REFRESH_SEC,
    SUPPORTED_EXCHANGES,
    TG_CHAT_ID,
    TG_TOKEN,
    WECHAT_WEBHOOK,
)


@dataclass
class StartupSelfCheckReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    infos: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class StartupSelfCheck:
    """Lightweight startup checks.

    Goals:
    - catch obvious config mistakes early (with readable logs),
    - create required runtime dirs,
    - a missing transport is a warning (detection-only), never a crash.

    Does NOT perform network I/O.
    """

    def __init__(
        self,
        logger,
        *,
        enabled_exchanges: Optional[Sequence[str]] = None,
        transport: Optional[str] = None,
        wechat_webhook: Optional[str] = None,
        tg_token: Optional[str] = None,
        tg_chat_id: Optional[str] = None,
        log_dir: Optional[str] = None,
    ):
        self.logger = logger
        self.enabled_exchanges = list(ENABLED_EXCHANGES if enabled_exchanges is None else enabled_exchanges)
        self.transport = str(NOTIFY_TRANSPORT if transport is None else transport).strip().lower()
        self.wechat_webhook = WECHAT_WEBHOOK if wechat_webhook is None else wechat_webhook
        self.tg_token = TG_TOKEN if tg_token is None else tg_token
        self.tg_chat_id = TG_CHAT_ID if tg_chat_id is None else tg_chat_id
        self.log_dir = LOG_DIR if log_dir is None else log_dir

    def run(self) -> StartupSelfCheckReport:
        r = StartupSelfCheckReport()
        self._check_runtime_dirs(r)
        self._check_applied_defaults(r)
        self._check_notifier(r)
        self._check_exchanges(r)
        self._check_timers_and_thresholds(r)
        self._emit(r)
        return r

    def _check_runtime_dirs(self, r: StartupSelfCheckReport) -> None:
        path = Path(self.log_dir)
        try:
            path.mkdir(parents=True, exist_ok=True)
            test = path / ".write_test.tmp"
            test.write_text("ok", encoding="utf-8")
            test.unlink(missing_ok=True)
            r.infos.append(f"runtime dir OK: {path.as_posix()}")
        except OSError as e:
            r.errors.append(f"runtime dir not writable: {path.as_posix()} ({e})")

    def _check_applied_defaults(self, r: StartupSelfCheckReport) -> None:
        for item in CONFIG_DEFAULTS_USED:
            r.infos.append(f"config default applied: {item}")

    def _check_notifier(self, r: StartupSelfCheckReport) -> None:
        if self.transport == "wechat":
            if (self.wechat_webhook or "").strip():
                r.infos.append("wechat notifier: enabled")
            else:
                r.warnings.append("wechat notifier: empty WECHAT_WEBHOOK, running detection-only")
            return
        if self.transport == "telegram":
            has_token = bool((self.tg_token or "").strip())
            has_chat = bool((self.tg_chat_id or "").strip())
            if has_token and has_chat:
                r.infos.append("telegram notifier: enabled")
            elif has_token ^ has_chat:
                r.warnings.append("telegram notifier: partial config (TG_TOKEN/TG_CHAT_ID), running detection-only")
            else:
                r.warnings.append("telegram notifier: empty TG_TOKEN/TG_CHAT_ID, running detection-only")
            return
        r.warnings.append(f"notifications.transport={self.transport!r} is unknown, running detection-only")

    def _check_exchanges(self, r: StartupSelfCheckReport) -> None:
        enabled = [str(x).strip().lower() for x in self.enabled_exchanges if str(x).strip()]
        known = [n for n in enabled if n in SUPPORTED_EXCHANGES]

        seen = set()
        dups = set()
        for name in enabled:
            if name in seen:
                dups.add(name)
            seen.add(name)
            if name not in SUPPORTED_EXCHANGES:
                r.warnings.append(f"unknown exchange key in config: {name} (will be skipped)")
        if dups:
            r.warnings.append(f"duplicate names in exchanges.enabled: {sorted(dups)}")

        if len(set(known)) < 2:
            r.errors.append(f"at least 2 supported exchanges must be enabled, got {sorted(set(known))}")
            return
        r.infos.append(f"exchanges: {', '.join(sorted(set(known)))}")

    def _check_timers_and_thresholds(self, r: StartupSelfCheckReport) -> None:
        def _positive(name: str, value) -> None:
            try:
                v = float(value)
            except (TypeError, ValueError):
                r.errors.append(f"{name} must be numeric, got {value!r}")
                return
            if v <= 0:
                r.errors.append(f"{name} must be > 0, got {v}")

        _positive("runtime.scan_interval_sec", SCAN_INTERVAL_SEC)
        _positive("runtime.schedule_refresh_sec", SCHEDULE_REFRESH_SEC)
        _positive("runtime.fetch_timeout_sec", FETCH_TIMEOUT_SEC)
        _positive("notifications.cooldown_sec", COOLDOWN_SEC)
        _positive("notifications.top_n", NOTIFY_TOP_N)
        _positive("notifications.ledger_retention_windows", LEDGER_RETENTION_WINDOWS)
        _positive("engine.threshold", PROFIT_THRESHOLD)

        if float(FETCH_TIMEOUT_SEC) > float(SCAN_INTERVAL_SEC):
            r.warnings.append(
                f"runtime.fetch_timeout_sec={float(FETCH_TIMEOUT_SEC):g}s > scan_interval_sec={float(SCAN_INTERVAL_SEC):g}s: "
                f"a slow exchange delays the next cycle"
            )
        r.infos.append(f"engine.threshold={float(PROFIT_THRESHOLD) * 100:.4f}%")

    def _emit(self, r: StartupSelfCheckReport) -> None:
        for msg in r.infos:
            self.logger.info(f"[CHECK] {msg}")
        for msg in r.warnings:
            self.logger.warning(f"[CHECK] {msg}")
        for msg in r.errors:
            self.logger.error(f"[CHECK] {msg}")

        if r.ok:
            self.logger.info("[CHECK] OK")
        else:
            self.logger.error(f"[CHECK] FAILED: {len(r.errors)} error(s)")
