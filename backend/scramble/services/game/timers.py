"""Delayed-call drivers for the round scheduler.

Both expose ``call_later(delay, fn) -> handle`` where ``handle.cancel()``
prevents a not-yet-fired call. ``ManualTimer`` is a logical clock for tests;
``SocketIOTimer`` sleeps inside a Socket.IO background task.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    def __init__(self, deadline: float):
        self.deadline = deadline
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualTimer:
    """Fires callbacks only when the test moves the clock."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now + delay)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle, fn))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _ in self._queue if h.pending)

    def next_deadline(self):
        for deadline, _, handle, _ in sorted(self._queue):
            if handle.pending:
                return deadline
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing everything that falls due. Returns calls fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle, fn = heapq.heappop(self._queue)
            self.now = deadline
            if handle.cancelled:
                continue
            handle.fired = True
            fn()
            fired += 1
        self.now = target
        return fired

    def run_all(self, limit: int = 1000) -> int:
        fired = 0
        while fired < limit:
            deadline = self.next_deadline()
            if deadline is None:
                break
            fired += self.advance(deadline - self.now)
        return fired


class SocketIOTimer:
    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(time.monotonic() + delay)

        def _worker():
            self.socketio.sleep(delay)
            if handle.cancelled:
                logger.info(f"[timer-abort] cancelled after {delay}s")
                return
            handle.fired = True
            fn()

        self.socketio.start_background_task(_worker)
        return handle
