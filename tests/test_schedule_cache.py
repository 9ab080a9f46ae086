"""Schedule cache and its reader/writer lock."""

import asyncio

from CORE.schedule_cache import AsyncRWLock, ScheduleCache


def test_replace_update_and_default():
    async def scenario():
        cache = ScheduleCache()
        await cache.replace({"BTCUSDT": 8, "ETHUSDT": 4, "BAD": 0})
        await cache.update({"ETHUSDT": 1, "SOLUSDT": 2})
        return (
            await cache.snapshot(),
            await cache.get("BAD"),
            await cache.interval_or_default("DOGEUSDT"),
            len(cache),
        )

    snap, bad, default, size = asyncio.run(scenario())
    assert snap == {"BTCUSDT": 8.0, "ETHUSDT": 1.0, "SOLUSDT": 2.0}
    assert bad is None
    assert default == 8.0
    assert size == 3


def test_replace_drops_symbols_missing_from_refresh():
    async def scenario():
        cache = ScheduleCache()
        await cache.replace({"BTCUSDT": 8, "ETHUSDT": 4})
        await cache.replace({"BTCUSDT": 1})
        return await cache.snapshot()

    assert asyncio.run(scenario()) == {"BTCUSDT": 1.0}


def test_writer_waits_for_active_reader():
    async def scenario():
        lock = AsyncRWLock()
        order = []
        release = asyncio.Event()

        async def reader():
            async with lock.read():
                order.append("r-in")
                await release.wait()
                order.append("r-out")

        async def writer():
            async with lock.write():
                order.append("w")

        rt = asyncio.create_task(reader())
        for _ in range(3):
            await asyncio.sleep(0)
        wt = asyncio.create_task(writer())
        for _ in range(3):
            await asyncio.sleep(0)
        snapshot = list(order)
        release.set()
        await asyncio.gather(rt, wt)
        return snapshot, order

    during, final = asyncio.run(scenario())
    assert during == ["r-in"]
    assert final == ["r-in", "r-out", "w"]


def test_readers_share_the_lock():
    async def scenario():
        lock = AsyncRWLock()
        inside = 0
        peak = 0

        async def reader():
            nonlocal inside, peak
            async with lock.read():
                inside += 1
                peak = max(peak, inside)
                await asyncio.sleep(0.01)
                inside -= 1

        await asyncio.gather(*(reader() for _ in range(5)))
        return peak

    assert asyncio.run(scenario()) == 5


def test_cancelled_waiting_writer_releases_queued_readers():
    async def scenario():
        lock = AsyncRWLock()
        entered = []
        release = asyncio.Event()

        async def holder():
            async with lock.read():
                await release.wait()

        async def writer():
            async with lock.write():
                entered.append("w")

        async def late_reader():
            async with lock.read():
                entered.append("r")

        ht = asyncio.create_task(holder())
        for _ in range(3):
            await asyncio.sleep(0)
        wt = asyncio.create_task(writer())
        for _ in range(3):
            await asyncio.sleep(0)
        rt = asyncio.create_task(late_reader())
        for _ in range(3):
            await asyncio.sleep(0)
        blocked = list(entered)

        wt.cancel()
        await asyncio.gather(wt, return_exceptions=True)
        await asyncio.wait_for(rt, timeout=1.0)
        release.set()
        await ht
        return blocked, entered

    blocked, final = asyncio.run(scenario())
    assert blocked == []
    assert final == ["r"]
