"""Cancellable one-shot timers.

A scheduler exposes two calls:

- ``call_later(delay, callback) -> ScheduledTask`` runs ``callback`` once
  after ``delay`` seconds unless the task is cancelled first
- ``dispatch(fn, *args, **kwargs)`` runs ``fn`` serialised with every
  other dispatched event and timer firing of the same session

``TimerSlot`` owns at most one pending task per concern (countdown, hide,
reveal). Arming a slot always cancels what it held before, so a concern
can never fire twice for one scheduling.
"""

import heapq
import itertools
from typing import Callable, List, Optional, Tuple


class ScheduledTask:
    __slots__ = ('callback', 'cancelled')

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled:
            return
        # A task fires at most once
        self.cancelled = True
        self.callback()


class TimerSlot:
    def __init__(self, scheduler):
        self._scheduler = scheduler
        self._task: Optional[ScheduledTask] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.cancelled

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()
        task = None

        def _fire():
            if self._task is task:
                self._task = None
            callback()

        task = self._scheduler.call_later(delay, _fire)
        self._task = task

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None


class ManualScheduler:
    """Virtual clock scheduler; time only moves when ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback)
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), task))
        return task

    def dispatch(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, task = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            task.fire()
        self.now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)
