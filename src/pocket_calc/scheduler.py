"""
Deferred callbacks driven by a host-advanced clock.

The engine never sleeps or spawns threads: it asks the scheduler to run a
callback after a delay, and whoever hosts the engine (a web request, the
CLI, a test) calls `run_due()` when time has moved on.
"""

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to (CLI replays, tests)."""

    def __init__(self, start_ms: int = 0) -> None:
        self.value = start_ms

    def __call__(self) -> float:
        return self.value

    def advance(self, ms: int) -> None:
        self.value += ms


class ScheduledTask:
    """Handle returned by `Scheduler.call_later`."""

    __slots__ = ("due", "callback", "name", "cancelled")

    def __init__(self, due: float, callback: Callable[[], None], name: str) -> None:
        self.due = due
        self.callback = callback
        self.name = name
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"<ScheduledTask {self.name} due={self.due:.0f}ms {state}>"


class Scheduler:
    """Min-heap of timed callbacks on an injectable monotonic clock (milliseconds)."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or monotonic_ms
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay_ms: int, callback: Callable[[], None], name: str = "task") -> ScheduledTask:
        """
        Schedule a callback to run once, no sooner than delay_ms from now.

        Args:
            delay_ms: Delay in milliseconds
            callback: Zero-argument callable
            name: Label used in logs

        Returns:
            ScheduledTask that can be cancelled
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        task = ScheduledTask(self.now() + delay_ms, callback, name)
        # Counter keeps FIFO order among equal due times
        heapq.heappush(self._queue, (task.due, next(self._counter), task))
        return task

    def run_due(self) -> int:
        """
        Run every non-cancelled task whose due time has passed.

        Returns:
            Number of callbacks executed
        """
        now = self.now()
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                logger.debug("Skipping cancelled %r", task)
                continue
            task.callback()
            ran += 1
        return ran

    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def next_due(self) -> Optional[float]:
        """Due time of the earliest live task, or None when idle."""
        live = [task.due for _, _, task in self._queue if not task.cancelled]
        return min(live) if live else None
