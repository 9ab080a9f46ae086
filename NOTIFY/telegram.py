# ============================================================
# FILE: NOTIFY/telegram.py
# ROLE: Telegram bot transport (sendMessage) with 429 back-off
# ============================================================

from __future__ import annotations

import asyncio
import time
from typing import Any, Optional

from const import (
    TG_MIN_SEND_INTERVAL_SEC,
    TG_RETRY_BACKOFF_PAD_SEC,
    TG_RETRY_MAX_ATTEMPTS,
)
from c_log import UnifiedLogger

from .base import HttpNotifier


class TgNotifier(HttpNotifier):
    """sendMessage to one chat.

    Parts are spaced by TG_MIN_SEND_INTERVAL_SEC; a 429 waits `retry_after`
    (+pad) and retries up to TG_RETRY_MAX_ATTEMPTS times per part.
    """

    PART_LIMIT = 3900  # chars, Telegram caps text at 4096
    TAG = "TG"

    def __init__(
        self,
        token: str,
        chat_id: str,
        logger: UnifiedLogger,
        *,
        min_interval_sec: float = TG_MIN_SEND_INTERVAL_SEC,
        max_attempts: int = TG_RETRY_MAX_ATTEMPTS,
        backoff_pad_sec: float = TG_RETRY_BACKOFF_PAD_SEC,
    ):
        super().__init__(logger, timeout_sec=20.0)
        token = (token or "").strip()
        self.chat_id = (chat_id or "").strip()
        if not token or not self.chat_id:
            raise ValueError("token and chat_id must be non-empty")
        self.send_url = f"https://api.telegram.org/bot{token}/sendMessage"
        self.min_interval_sec = max(0.0, float(min_interval_sec))
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_pad_sec = max(0.0, float(backoff_pad_sec))
        self._not_before = 0.0  # monotonic

    @staticmethod
    def _retry_after(data: Any) -> float:
        params = data.get("parameters") if isinstance(data, dict) else None
        if isinstance(params, dict):
            try:
                return float(params.get("retry_after"))
            except (TypeError, ValueError):
                pass
        return 30.0

    async def _post(self, text: str) -> Optional[float]:
        """One sendMessage call. Returns retry_after on 429, None on success."""
        session = await self._get_session()
        payload = {"chat_id": self.chat_id, "text": text, "disable_web_page_preview": True}
        async with session.post(self.send_url, json=payload) as resp:
            body_text = await resp.text()
            try:
                data = await resp.json(content_type=None)
            except ValueError:
                data = None
            if resp.status == 429:
                return self._retry_after(data)
            if resp.status != 200:
                raise RuntimeError(f"Telegram HTTP {resp.status}: {body_text[:300]}")
            if not isinstance(data, dict):
                raise RuntimeError(f"Telegram non-JSON response: {body_text[:300]}")
            if not data.get("ok"):
                raise RuntimeError(f"Telegram API error: {data.get('description') or body_text[:300]}")
        return None

    async def _send_once(self, content: str) -> None:
        for attempt in range(1, self.max_attempts + 1):
            wait = self._not_before - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            retry_after = await self._post(content)
            if retry_after is None:
                self._not_before = time.monotonic() + self.min_interval_sec
                return
            delay = max(self.min_interval_sec, retry_after + self.backoff_pad_sec)
            self._not_before = time.monotonic() + delay
            if attempt < self.max_attempts:
                self.logger.warning(f"[TG] rate limited, retry in {delay:.1f}s (attempt {attempt}/{self.max_attempts})")
        raise RuntimeError(f"Telegram HTTP 429 after {self.max_attempts} attempts")
