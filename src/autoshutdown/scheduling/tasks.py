"""Tick-driven deferred task scheduler.

There is no background thread or timer. Time only moves when the owner calls
``update(elapsed)``, and due callbacks run synchronously inside that call.

Example:
    scheduler = TaskScheduler()

    def announce(context: TaskContext) -> None:
        print("fired at", context.now)

    scheduler.schedule(30.0, announce)
    scheduler.update(31.0)  # announce runs here
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

TaskCallback = Callable[["TaskContext"], object]


@dataclass(order=True)
class _Task:
    due: float
    sequence: int
    task_id: int = field(compare=False)
    callback: TaskCallback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class TaskContext:
    """Handle passed to a firing callback."""

    def __init__(self, scheduler: TaskScheduler, task: _Task) -> None:
        self._scheduler = scheduler
        self._task = task

    @property
    def task_id(self) -> int:
        return self._task.task_id

    @property
    def now(self) -> float:
        """Scheduler time at which the callback runs."""
        return self._scheduler.now

    def repeat(self, delay: float) -> int:
        """Re-arm the same callback ``delay`` seconds from now."""
        return self._scheduler.schedule(delay, self._task.callback)


class TaskScheduler:
    """One-shot callbacks fired from explicit ``update`` calls."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[_Task] = []
        self._tasks: dict[int, _Task] = {}
        self._ids = itertools.count(1)
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        """Total time advanced through ``update``, in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, delay: float, callback: TaskCallback) -> int:
        """Arm ``callback`` to fire no earlier than ``delay`` seconds from now.

        Returns:
            Task id usable with ``cancel``.

        Raises:
            ValueError: If ``delay`` is negative.
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        task = _Task(
            due=self._now + delay,
            sequence=next(self._sequence),
            task_id=next(self._ids),
            callback=callback,
        )
        heapq.heappush(self._queue, task)
        self._tasks[task.task_id] = task
        logger.debug(
            "task_scheduled",
            extra={"task.id": task.task_id, "task.delay": delay},
        )
        return task.task_id

    def cancel(self, task_id: int) -> bool:
        """Cancel one pending task. Returns False if it is not pending."""
        task = self._tasks.pop(task_id, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_all(self) -> None:
        """Remove every pending task."""
        if self._tasks:
            logger.debug("tasks_cancelled", extra={"task.count": len(self._tasks)})
        self._queue.clear()
        self._tasks.clear()

    def update(self, elapsed: float) -> int:
        """Advance time by ``elapsed`` seconds and run due callbacks.

        Callbacks run in due order, first-scheduled first among equal due
        times. A failing callback is logged and the rest still run.

        Returns:
            Number of callbacks that ran.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed must be non-negative, got {elapsed}")
        self._now += elapsed

        fired = 0
        while self._queue and self._queue[0].due <= self._now:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._tasks.pop(task.task_id, None)
            fired += 1
            try:
                task.callback(TaskContext(self, task))
            except Exception as e:
                logger.error(
                    "task_callback_error",
                    extra={"task.id": task.task_id, "error.message": str(e)},
                )
        return fired
