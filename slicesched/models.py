"""Task records and the response payloads built from them."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_index_counter = itertools.count()
_index_lock = threading.Lock()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """A unit of work needing ``remaining_time`` slices of execution."""

    index: int
    remaining_time: int
    is_completed: bool = False
    created_time: datetime = field(default_factory=_now)

    def execute(self, time_slice: int) -> None:
        """Run the task for ``time_slice`` units, completing it if that is enough."""
        if self.remaining_time > time_slice:
            self.remaining_time -= time_slice
        else:
            self.remaining_time = 0
            self.is_completed = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "Index": self.index,
            "RemainingTime": self.remaining_time,
            "IsCompleted": self.is_completed,
            "CreatedTime": self.created_time.isoformat(),
        }


def new_task(duration: int) -> Task:
    """Create a task with the next process-wide index."""
    with _index_lock:
        index = next(_index_counter)
    return Task(index=index, remaining_time=duration)


@dataclass
class ScheduleResult:
    """What one scheduling cycle executed."""

    time: int
    task_indexes: list[int]
    remaining_times: list[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "task_indexes": list(self.task_indexes),
            "remaining_times": list(self.remaining_times),
        }


@dataclass
class TaskSubmissionResponse:
    """Acknowledgement of a batch of submitted tasks."""

    job_id: str
    message: str
    task_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "message": self.message,
            "task_count": self.task_count,
        }


@dataclass
class StatusResponse:
    """A snapshot of the scheduler's state."""

    current_time: int
    schedule_history: list[ScheduleResult]
    active_tasks: list[Task]
    completed_tasks: list[Task]
    current_strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_time": self.current_time,
            "schedule_history": [r.to_dict() for r in self.schedule_history],
            "active_tasks": [t.to_dict() for t in self.active_tasks],
            "completed_tasks": [t.to_dict() for t in self.completed_tasks],
            "current_strategy": self.current_strategy,
        }