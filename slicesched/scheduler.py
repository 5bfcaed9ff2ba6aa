"""Priority-queue schedulers and the manager that switches between them."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import replace
from typing import Any

from .models import Task


class UnsupportedStrategyError(ValueError):
    """Raised when a scheduling strategy name is not known."""

    def __init__(self, strategy: str) -> None:
        super().__init__(f"unsupported scheduler strategy: {strategy}")
        self.strategy = strategy


class Scheduler:
    """A queue of pending tasks ordered by a strategy-specific key."""

    name = ""

    def __init__(self) -> None:
        self._heap: list[tuple[Any, int, Task]] = []
        self._seq = itertools.count()

    def _key(self, task: Task) -> Any:
        raise NotImplementedError

    def _push(self, task: Task) -> None:
        heapq.heappush(self._heap, (self._key(task), next(self._seq), task))

    def _pop(self) -> Task:
        return heapq.heappop(self._heap)[2]

    def schedule(self, bandwidth: int) -> list[Task]:
        """Run tasks in priority order until ``bandwidth`` units are used.

        Returns snapshots of the tasks that ran; unfinished ones are requeued.
        """
        scheduled: list[Task] = []
        requeue: list[Task] = []
        used = 0
        while self._heap and used < bandwidth:
            task = self._pop()
            if task.is_completed:
                continue
            allocated = min(task.remaining_time, bandwidth - used)
            task.execute(allocated)
            used += allocated
            scheduled.append(replace(task))
            if not task.is_completed:
                requeue.append(task)
        for task in requeue:
            self._push(task)
        return scheduled

    def add_task(self, task: Task) -> None:
        """Queue a copy of ``task`` unless it is already completed."""
        if not task.is_completed:
            self._push(replace(task))

    def next_task(self) -> Task | None:
        """Remove and return the highest-priority unfinished task, or None."""
        while self._heap:
            task = self._pop()
            if not task.is_completed:
                return task
        return None

    def __len__(self) -> int:
        return len(self._heap)


class FIFOScheduler(Scheduler):
    """Runs tasks in order of creation."""

    name = "FIFO"

    def _key(self, task: Task) -> Any:
        return task.created_time


class SRTFScheduler(Scheduler):
    """Runs the task with the shortest remaining time first, then lowest index."""

    name = "SRTF"

    def _key(self, task: Task) -> Any:
        return (task.remaining_time, task.index)


class SchedulerManager:
    """Holds the available schedulers and the one currently in use."""

    def __init__(self) -> None:
        fifo = FIFOScheduler()
        srtf = SRTFScheduler()
        self._schedulers: dict[str, Scheduler] = {fifo.name: fifo, srtf.name: srtf}
        self._current: Scheduler = fifo

    def switch(self, strategy: str) -> None:
        """Make ``strategy`` current, moving pending tasks over to it."""
        try:
            new = self._schedulers[strategy]
        except KeyError:
            raise UnsupportedStrategyError(strategy) from None
        if new.name != self._current.name:
            self._migrate(self._current, new)
        self._current = new

    @staticmethod
    def _migrate(old: Scheduler, new: Scheduler) -> None:
        pending = list(iter(old.next_task, None))
        for task in pending:
            new.add_task(task)

    def current(self) -> Scheduler:
        return self._current

    def available_strategies(self) -> list[str]:
        return list(self._schedulers)