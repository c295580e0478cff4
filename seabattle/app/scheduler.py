"""Deferred one-shot callbacks driven by an explicit clock."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from heapq import heappop, heappush

TaskCallback = Callable[[], None]


@dataclass(slots=True)
class _Task:
    task_id: int
    due_seconds: float
    callback: TaskCallback


class Scheduler:
    """Clock-advanced timer queue used to pace computer turns."""

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._next_task_id = 1
        self._tasks: dict[int, _Task] = {}
        self._queue: list[tuple[float, int]] = []

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def is_pending(self, task_id: int) -> bool:
        return task_id in self._tasks

    def call_later(self, delay_seconds: float, callback: TaskCallback) -> int:
        """Schedule ``callback`` to run once after ``delay_seconds``."""
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        task_id = self._next_task_id
        self._next_task_id += 1
        due_seconds = self._now_seconds + delay_seconds
        self._tasks[task_id] = _Task(task_id=task_id, due_seconds=due_seconds, callback=callback)
        heappush(self._queue, (due_seconds, task_id))
        return task_id

    def cancel(self, task_id: int) -> None:
        # The heap entry stays behind and is skipped once it comes due.
        self._tasks.pop(task_id, None)

    def advance(self, delta_seconds: float) -> int:
        """Move the clock forward and run every callback that became due."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        self._now_seconds += delta_seconds
        executed = 0
        while self._queue and self._queue[0][0] <= self._now_seconds:
            _, task_id = heappop(self._queue)
            task = self._tasks.pop(task_id, None)
            if task is None:
                continue
            task.callback()
            executed += 1
        return executed
