"""Timer abstraction driving gravity ticks and the line-clear settle delay.

The session never sleeps or reads a clock; it asks a scheduler to call it
back. ``ManualScheduler`` keeps a virtual clock in milliseconds that the
owner advances: tests step it directly, the Gymnasium env advances it a fixed
amount per step and the pygame front end advances it by frame time.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


Callback = Callable[[], None]


class TimerHandle:
    def __init__(self, due_ms: float, period_ms: Optional[float], callback: Callback) -> None:
        self.due_ms = due_ms
        self.period_ms = period_ms
        self.callback = callback
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        ...

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        ...


class ManualScheduler:
    """Deterministic scheduler advanced by hand.

    Timers fire in due-time order; timers due at the same instant fire in
    the order they were scheduled. Callbacks may schedule or cancel timers,
    including the one currently firing.
    """

    def __init__(self) -> None:
        self.now_ms = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.due_ms, next(self._seq), handle))

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms}")
        handle = TimerHandle(self.now_ms + delay_ms, None, callback)
        self._push(handle)
        return handle

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        if period_ms <= 0:
            raise ValueError(f"period must be > 0, got {period_ms}")
        handle = TimerHandle(self.now_ms + period_ms, period_ms, callback)
        self._push(handle)
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.active)

    def advance(self, ms: float) -> None:
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now_ms = due
            if handle.period_ms is not None:
                handle.due_ms = due + handle.period_ms
                self._push(handle)
            else:
                handle.cancelled = True
            handle.callback()
        self.now_ms = target
