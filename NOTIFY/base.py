# ============================================================
# FILE: NOTIFY/base.py
# ROLE: Shared webhook-transport plumbing: pooled session, line-aware
#       splitting under a size limit, numbered multi-part delivery.
# ============================================================

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import aiohttp

from c_log import UnifiedLogger


class HttpNotifier:
    """Base for one-digest-per-cycle transports.

    Subclasses set PART_LIMIT and implement `_send_once`; `_size`/`_head`
    define what the limit counts (characters by default).
    """

    PART_LIMIT = 2000
    TAG = "NOTIFY"

    def __init__(self, logger: UnifiedLogger, timeout_sec: float = 10.0):
        self.logger = logger
        self._timeout = aiohttp.ClientTimeout(total=float(timeout_sec))
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(timeout=self._timeout)
            return self._session

    @classmethod
    def _size(cls, s: str) -> int:
        return len(s)

    @classmethod
    def _head(cls, s: str) -> str:
        return s[: cls.PART_LIMIT]

    @classmethod
    def _split_text(cls, text: str) -> list[str]:
        parts: list[str] = []
        cur = ""
        for line in str(text or "").split("\n"):
            candidate = line if not cur else f"{cur}\n{line}"
            if cls._size(candidate) <= cls.PART_LIMIT:
                cur = candidate
                continue
            if cur:
                parts.append(cur)
            # a single oversized line is cut hard
            while cls._size(line) > cls.PART_LIMIT:
                head = cls._head(line)
                parts.append(head)
                line = line[len(head):]
            cur = line
        if cur:
            parts.append(cur)
        return parts or [""]

    async def _send_once(self, content: str) -> None:
        raise NotImplementedError

    async def deliver(self, text: str) -> None:
        """Send the whole digest; raises on the first part that fails."""
        parts = self._split_text(text)
        for i, part in enumerate(parts, start=1):
            content = part if len(parts) == 1 else f"[{i}/{len(parts)}]\n{part}"
            await self._send_once(content)
        if len(parts) > 1:
            self.logger.debug(f"[{self.TAG}] digest sent in {len(parts)} parts")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            with contextlib.suppress(aiohttp.ClientError, OSError):
                await self._session.close()
        self._session = None
