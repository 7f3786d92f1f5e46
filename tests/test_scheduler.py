import asyncio

import pytest

from simulation.scheduler import AsyncioScheduler, VirtualClock


def test_virtual_clock_fires_in_due_order_then_fifo():
    clock = VirtualClock()
    fired = []
    clock.call_later(300, fired.append, "c")
    clock.call_later(100, fired.append, "a")
    clock.call_later(100, fired.append, "b")

    assert clock.advance(99) == 0
    assert clock.advance(1) == 2
    assert fired == ["a", "b"]
    assert clock.now_ms() == 100

    clock.advance(500)
    assert fired == ["a", "b", "c"]
    assert clock.now_ms() == 600


def test_cancelled_timers_never_fire():
    clock = VirtualClock()
    fired = []
    handle = clock.call_later(10, fired.append, "x")
    handle.cancel()

    clock.advance(100)
    assert fired == []
    assert handle.cancelled
    assert clock.pending() == 0


def test_timers_armed_during_advance_fire_within_the_window():
    clock = VirtualClock()
    seen = []

    def first():
        seen.append(("first", clock.now_ms()))
        clock.call_later(50, lambda: seen.append(("second", clock.now_ms())))

    clock.call_later(10, first)
    clock.advance(100)
    assert seen == [("first", 10), ("second", 60)]


def test_call_every_repeats_until_cancelled():
    clock = VirtualClock()
    times = []
    handle = clock.call_every(5000, lambda: times.append(clock.now_ms()))

    clock.advance(15000)
    assert times == [5000, 10000, 15000]

    handle.cancel()
    clock.advance(15000)
    assert times == [5000, 10000, 15000]
    assert clock.pending() == 0


def test_invalid_delays_are_rejected():
    clock = VirtualClock()
    with pytest.raises(ValueError):
        clock.call_later(-1, lambda: None)
    with pytest.raises(ValueError):
        clock.call_every(0, lambda: None)
    with pytest.raises(ValueError):
        clock.advance(-5)


def test_asyncio_scheduler_runs_and_cancels_on_the_loop():
    async def scenario():
        scheduler = AsyncioScheduler()
        fired = []
        scheduler.call_later(5, fired.append, "kept")
        dropped = scheduler.call_later(5, fired.append, "dropped")
        dropped.cancel()
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["kept"]


def test_asyncio_scheduler_repeats():
    async def scenario():
        scheduler = AsyncioScheduler()
        ticks = []
        handle = scheduler.call_every(5, lambda: ticks.append(1))
        await asyncio.sleep(0.1)
        handle.cancel()
        count = len(ticks)
        await asyncio.sleep(0.03)
        return count, len(ticks)

    before, after = asyncio.run(scenario())
    assert before >= 2
    assert after == before
