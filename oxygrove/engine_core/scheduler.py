"""
Scheduler - Cooperative simulated-time task runner.

One logical thread of control: tasks never overlap, they are run one
after another in due-time order while the clock is advanced. Ties are
broken by registration order, so two tasks due at the same instant
always run in the order they were scheduled.

Two kinds of task:
- Periodic: rescheduled every `interval_ms` for the scheduler's lifetime
- One-shot: runs once after `delay_ms`; there is no way to cancel it
"""

from __future__ import annotations
from dataclasses import dataclass, field
import heapq
import logging
from typing import Callable

logger = logging.getLogger(__name__)

TaskCallback = Callable[[int], None]


@dataclass(order=True)
class ScheduledTask:
    due: int
    seq: int
    name: str = field(compare=False)
    callback: TaskCallback = field(compare=False, repr=False)
    interval_ms: int | None = field(default=None, compare=False)

    @property
    def periodic(self) -> bool:
        return self.interval_ms is not None


class Scheduler:
    """
    Drives periodic and delayed tasks against a millisecond clock.

    Usage:
        scheduler = Scheduler()
        scheduler.every(1000, lambda now: print("tick", now), name="tick")
        scheduler.after(2500, lambda now: print("once", now), name="once")
        scheduler.advance(3000)  # tick 1000, tick 2000, once 2500, tick 3000
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._queue: list[ScheduledTask] = []
        self._seq = 0

    @property
    def now(self) -> int:
        """Current engine time in milliseconds."""
        return self._now

    def every(self, interval_ms: int, callback: TaskCallback, name: str = "periodic") -> ScheduledTask:
        """Run `callback(now)` every interval, first one interval from now."""
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        return self._push(self._now + interval_ms, name, callback, interval_ms)

    def after(self, delay_ms: int, callback: TaskCallback, name: str = "delayed") -> ScheduledTask:
        """Run `callback(now)` once, `delay_ms` from now."""
        if delay_ms < 0:
            raise ValueError(f"Delay must be non-negative, got {delay_ms}")
        return self._push(self._now + delay_ms, name, callback, None)

    def advance(self, ms: int) -> int:
        """Move the clock forward by `ms`, running due tasks. Returns tasks run."""
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards ({ms} ms)")
        return self.advance_to(self._now + ms)

    def advance_to(self, target_ms: int) -> int:
        """Move the clock to `target_ms`, running every task due on the way."""
        if target_ms < self._now:
            raise ValueError(f"Cannot move the clock backwards to {target_ms} (now {self._now})")

        ran = 0
        while self._queue and self._queue[0].due <= target_ms:
            task = heapq.heappop(self._queue)
            self._now = task.due
            if task.periodic:
                self._push(task.due + task.interval_ms, task.name, task.callback, task.interval_ms)
            logger.debug("Running task %s at %d ms", task.name, task.due)
            task.callback(task.due)
            ran += 1

        self._now = target_ms
        return ran

    def pending(self, name: str | None = None) -> list[ScheduledTask]:
        """Queued tasks in due order, optionally filtered by name."""
        tasks = sorted(self._queue)
        if name is None:
            return tasks
        return [t for t in tasks if t.name == name]

    def _push(
        self,
        due: int,
        name: str,
        callback: TaskCallback,
        interval_ms: int | None,
    ) -> ScheduledTask:
        task = ScheduledTask(due=due, seq=self._seq, name=name, callback=callback, interval_ms=interval_ms)
        self._seq += 1
        heapq.heappush(self._queue, task)
        return task
