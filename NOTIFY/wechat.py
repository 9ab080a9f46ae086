# ============================================================
# FILE: NOTIFY/wechat.py
# ROLE: WeChat Work group-robot webhook transport (text messages)
# ============================================================

from __future__ import annotations

from c_log import UnifiedLogger

from .base import HttpNotifier


class WechatNotifier(HttpNotifier):
    """Group robot webhook: POST {"msgtype": "text", "text": {"content": ...}}.

    - Checks the `errcode` field of the JSON reply, not only HTTP status.
    - Content is limited to 2048 bytes (UTF-8), longer digests are split on line breaks.
    - Raises on failure; the caller decides what a failed delivery means.
    """

    PART_LIMIT = 2000  # bytes, margin under the 2048 limit
    TAG = "WECHAT"

    def __init__(self, webhook_url: str, logger: UnifiedLogger, timeout_sec: float = 10.0):
        super().__init__(logger, timeout_sec=timeout_sec)
        self.webhook_url = (webhook_url or "").strip()
        if not self.webhook_url:
            raise ValueError("webhook_url must be non-empty")

    @classmethod
    def _size(cls, s: str) -> int:
        return len(s.encode("utf-8"))

    @classmethod
    def _head(cls, s: str) -> str:
        return s.encode("utf-8")[: cls.PART_LIMIT].decode("utf-8", errors="ignore")

    async def _send_once(self, content: str) -> None:
        session = await self._get_session()
        payload = {"msgtype": "text", "text": {"content": content}}
        async with session.post(self.webhook_url, json=payload) as resp:
            body_text = await resp.text()
            if resp.status != 200:
                raise RuntimeError(f"WeChat webhook HTTP {resp.status}: {body_text[:300]}")
            try:
                data = await resp.json(content_type=None)
            except ValueError:
                raise RuntimeError(f"WeChat webhook non-JSON response: {body_text[:300]}")
            if not isinstance(data, dict):
                raise RuntimeError(f"WeChat webhook unexpected payload type: {type(data).__name__}")
            errcode = data.get("errcode", 0)
            if str(errcode) != "0":
                raise RuntimeError(f"WeChat webhook error {errcode}: {data.get('errmsg') or body_text[:300]}")
