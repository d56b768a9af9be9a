"""
Clock abstraction for the timing components

FrameSequencer and TransitionOrchestrator never sleep or spawn tasks. They
read the time and register one-shot callbacks through a Clock:

    now()                        -> float, milliseconds, monotonic
    call_later(delay_ms, fn)     -> handle with cancel()

AsyncioClock drives them from a running event loop. ManualClock is a
deterministic simulated clock: time only moves when advance() is called.
"""

from __future__ import annotations
import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioClock:
    """
    Clock backed by an asyncio event loop.

    If no loop is given, the running loop at call time is used, so the
    clock can be created before the loop starts.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        if self._loop is not None:
            return self._loop.time() * 1000
        return time.monotonic() * 1000

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(0.0, delay_ms) / 1000, callback)


class ManualTimer:
    """Handle returned by ManualClock.call_later()"""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualClock:
    """
    Simulated clock for tests and offline rendering.

    Example:
        clock = ManualClock()
        sequencer = FrameSequencer(frames, tempo_ms=100, clock=clock)
        sequencer.start()
        clock.advance(250)    # fires every tick due within the 250 ms
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    def advance(self, ms: float) -> int:
        """
        Move time forward by ms, firing due timers in time order.

        Timers scheduled by callbacks during the advance fire too if they
        fall inside the window.

        Returns:
            Number of callbacks fired
        """
        if ms < 0:
            raise ValueError("ManualClock cannot go backwards")

        target = self._now + ms
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            # Overdue timers (after jump()) fire at the current time
            self._now = max(self._now, due)
            timer.callback()
            fired += 1

        self._now = target
        return fired

    def jump(self, ms: float) -> None:
        """Move time forward without firing anything (simulates a stalled host)"""
        if ms < 0:
            raise ValueError("ManualClock cannot go backwards")
        self._now += ms

    def pending_count(self) -> int:
        """Number of scheduled, non-cancelled timers"""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled())
