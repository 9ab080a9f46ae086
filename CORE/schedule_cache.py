# ============================================================
# FILE: CORE/schedule_cache.py
# ROLE: Per-adapter funding schedule cache behind a reader/writer lock.
# ============================================================

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Dict, Mapping, Optional

from CORE.models import DEFAULT_FUNDING_INTERVAL_HOURS


class AsyncRWLock:
    """Many concurrent readers, one exclusive writer.

    Writers are preferred: once a writer waits, new readers queue behind it,
    so an hourly refresh cannot be starved by back-to-back fetches.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._writers_waiting == 0)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextlib.asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
                # a cancelled waiter must release readers parked behind it
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class ScheduleCache:
    """symbol -> funding interval hours, owned by one adapter instance.

    refresh_schedule() writes (exclusive), fetch() reads (shared).
    """

    def __init__(self, default_interval_hours: float = DEFAULT_FUNDING_INTERVAL_HOURS):
        self.default_interval_hours = float(default_interval_hours)
        self._intervals: Dict[str, float] = {}
        self._lock = AsyncRWLock()

    def __len__(self) -> int:
        return len(self._intervals)

    async def replace(self, intervals: Mapping[str, float]) -> None:
        clean = {str(k): float(v) for k, v in intervals.items() if v and float(v) > 0}
        async with self._lock.write():
            self._intervals = clean

    async def update(self, intervals: Mapping[str, float]) -> None:
        clean = {str(k): float(v) for k, v in intervals.items() if v and float(v) > 0}
        if not clean:
            return
        async with self._lock.write():
            self._intervals.update(clean)

    async def get(self, symbol: str) -> Optional[float]:
        async with self._lock.read():
            return self._intervals.get(symbol)

    async def snapshot(self) -> Dict[str, float]:
        async with self._lock.read():
            return dict(self._intervals)

    async def interval_or_default(self, symbol: str) -> float:
        v = await self.get(symbol)
        return float(v) if v else self.default_interval_hours
