"""
Purpose: The timer abstraction every moving part runs on.
What it does:
- Scheduler: call_later / call_every / now_ms, returning cancellable handles
- VirtualClock: a manually advanced clock for tests and offline simulation
- AsyncioScheduler: real time, backed by the asyncio event loop

All three timer families (signal cycle, animation ticks, session stage
delays) go through one of these, so nothing ever blocks a caller.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Any, Callable, List, Optional, Tuple


class TimerHandle:
    """
    A cancellable reference to one scheduled callback.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class _RepeatingHandle(TimerHandle):
    """Keeps pointing at whichever underlying timer is currently armed."""

    def __init__(self):
        super().__init__()
        self.current: Optional[TimerHandle] = None

    def cancel(self) -> None:
        super().cancel()
        if self.current is not None:
            self.current.cancel()


class Scheduler:
    """
    Base class. Subclasses provide now_ms() and call_later().
    """

    def now_ms(self) -> float:
        raise NotImplementedError

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, period_ms: float, callback: Callable[[], Any]) -> TimerHandle:
        """
        Run `callback` every `period_ms`, first run one period from now,
        until the returned handle is cancelled.
        """
        if period_ms <= 0:
            raise ValueError("period_ms must be > 0")

        handle = _RepeatingHandle()

        def fire() -> None:
            if handle.cancelled:
                return
            # Re-arm before running so the period does not drift with callback time.
            handle.current = self.call_later(period_ms, fire)
            callback()

        handle.current = self.call_later(period_ms, fire)
        return handle


class _VirtualTimer(TimerHandle):

    def __init__(self, due_ms: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        super().__init__()
        self.due_ms = due_ms
        self.callback = callback
        self.args = args


class VirtualClock(Scheduler):
    """
    Deterministic scheduler: time only moves when advance() is called.

    Timers fire in due-time order; timers due at the same instant fire in the
    order they were scheduled.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)
        self._queue: List[Tuple[float, int, _VirtualTimer]] = []
        self._sequence = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        timer = _VirtualTimer(self._now + delay_ms, callback, args)
        heapq.heappush(self._queue, (timer.due_ms, next(self._sequence), timer))
        return timer

    def advance(self, delta_ms: float) -> int:
        """
        Move time forward by `delta_ms`, firing every timer that falls due on
        the way (including timers scheduled by callbacks during the advance).
        Returns how many callbacks ran.
        """
        if delta_ms < 0:
            raise ValueError("delta_ms must be >= 0")

        target = self._now + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = due_ms
            timer.callback(*timer.args)
            fired += 1
        self._now = target
        return fired

    def pending(self) -> int:
        """Number of armed, not-yet-cancelled timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class _AsyncioTimer(TimerHandle):

    def __init__(self, handle: asyncio.TimerHandle):
        super().__init__()
        self._handle = handle

    def cancel(self) -> None:
        super().cancel()
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """
    Real-time scheduler on an asyncio event loop. Everything runs on the
    loop's thread, so simulation state needs no locking.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        return _AsyncioTimer(self.loop.call_later(delay_ms / 1000.0, callback, *args))
