# ============================================================
# FILE: NOTIFY/__init__.py
# ROLE: Outbound notification transports + digest formatting.
# ============================================================

from __future__ import annotations

from typing import Optional, Union

from const import NOTIFY_TRANSPORT, TG_CHAT_ID, TG_TOKEN, WECHAT_WEBHOOK

from .telegram import TgNotifier
from .wechat import WechatNotifier

Notifier = Union[WechatNotifier, TgNotifier]

__all__ = ["Notifier", "TgNotifier", "WechatNotifier", "build_notifier"]


def build_notifier(
    logger,
    *,
    transport: str = NOTIFY_TRANSPORT,
    wechat_webhook: str = WECHAT_WEBHOOK,
    tg_token: str = TG_TOKEN,
    tg_chat_id: str = TG_CHAT_ID,
) -> Optional[Notifier]:
    """Return the configured transport, or None (detection-only) when it is not configured."""
    kind = str(transport or "").strip().lower()
    if kind == "wechat":
        if not (wechat_webhook or "").strip():
            logger.warning("[NOTIFY] WECHAT_WEBHOOK is empty: detection-only mode, digests go to the log")
            return None
        return WechatNotifier(wechat_webhook, logger=logger)
    if kind == "telegram":
        if not (tg_token or "").strip() or not (tg_chat_id or "").strip():
            logger.warning("[NOTIFY] TG_TOKEN or TG_CHAT_ID is empty: detection-only mode, digests go to the log")
            return None
        return TgNotifier(tg_token, tg_chat_id, logger=logger)
    logger.warning(f"[NOTIFY] unknown transport {transport!r}: detection-only mode")
    return None
