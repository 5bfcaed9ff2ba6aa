"""The task service that owns scheduling state, and the loop that drives it."""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace

from .models import ScheduleResult, StatusResponse, Task, TaskSubmissionResponse, new_task
from .scheduler import SchedulerManager


def _format_list(values: list[int]) -> str:
    return "[" + " ".join(str(v) for v in values) + "]"


class TaskService:
    """Accepts tasks, runs scheduling cycles and reports status, thread-safely."""

    def __init__(self, bandwidth: int) -> None:
        self.bandwidth = bandwidth
        self._lock = threading.RLock()
        self._manager = SchedulerManager()
        self._completed: list[Task] = []
        self._history: list[ScheduleResult] = []
        self._current_time = 0

    def submit_tasks(self, time_slices: list[int]) -> TaskSubmissionResponse:
        """Queue one task per time slice on the current scheduler."""
        with self._lock:
            scheduler = self._manager.current()
            for duration in time_slices:
                scheduler.add_task(new_task(duration))
        return TaskSubmissionResponse(
            job_id=str(uuid.uuid4())[:8],
            message="Task submitted successfully",
            task_count=len(time_slices),
        )

    def status(self) -> StatusResponse:
        """Return a snapshot of time, history, active and completed tasks."""
        with self._lock:
            return StatusResponse(
                current_time=self._current_time,
                schedule_history=list(self._history),
                active_tasks=self._active_tasks(),
                completed_tasks=[replace(task) for task in self._completed],
                current_strategy=self._manager.current().name,
            )

    def _active_tasks(self) -> list[Task]:
        scheduler = self._manager.current()
        drained: list[Task] = []
        while len(scheduler) > 0:
            task = scheduler.next_task()
            if task is not None and not task.is_completed:
                drained.append(task)
        for task in drained:
            scheduler.add_task(task)
        return drained

    def switch_scheduler(self, strategy: str) -> None:
        """Switch strategy; raises UnsupportedStrategyError for unknown names."""
        with self._lock:
            self._manager.switch(strategy)

    def execute_scheduling_cycle(self) -> None:
        """Run one cycle of the current scheduler and advance the clock."""
        with self._lock:
            scheduler = self._manager.current()
            if len(scheduler) == 0:
                return
            scheduled = scheduler.schedule(self.bandwidth)
            if scheduled:
                self._history.append(
                    ScheduleResult(
                        time=self._current_time,
                        task_indexes=[task.index for task in scheduled],
                        remaining_times=[task.remaining_time for task in scheduled],
                    )
                )
            self._completed.extend(task for task in scheduled if task.is_completed)
            self._current_time += 1

    def has_active_tasks(self) -> bool:
        with self._lock:
            return len(self._manager.current()) > 0

    def available_strategies(self) -> list[str]:
        return self._manager.available_strategies()


class SchedulerService:
    """Runs scheduling cycles on a background thread at a fixed interval."""

    def __init__(
        self,
        task_service: TaskService,
        tick_interval: float = 1.0,
        drain_timeout: float = 10.0,
        poll_interval: float = 0.1,
    ) -> None:
        self.task_service = task_service
        self.tick_interval = tick_interval
        self.drain_timeout = drain_timeout
        self.poll_interval = poll_interval
        self._lock = threading.Lock()
        self._running = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def start(self) -> None:
        """Start the background loop; does nothing if already running."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), daemon=True
            )
            self._thread.start()
            print("Scheduler service started")

    def _halt(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._running = False

    def stop(self) -> None:
        """Stop the background loop; does nothing if not running."""
        with self._lock:
            if not self._running:
                return
            self._halt()
            print("Scheduler service stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.tick_interval):
            if self.task_service.has_active_tasks():
                self.task_service.execute_scheduling_cycle()
                self._print_current_status()

    def _print_current_status(self) -> None:
        history = self.task_service.status().schedule_history
        if not history:
            return
        latest = history[-1]
        print(
            f"Time: {latest.time}, "
            f"Executed Task Indexes: {_format_list(latest.task_indexes)}, "
            f"Remaining Times: {_format_list(latest.remaining_times)}"
        )

    def graceful_stop(self) -> None:
        """Stop the loop, then wait up to the drain timeout for tasks to finish."""
        with self._lock:
            if not self._running:
                return
            print("Gracefully stopping scheduler service...")
            self._halt()
        self._wait_for_current_tasks()
        print("Scheduler service gracefully stopped")

    def _wait_for_current_tasks(self) -> None:
        waiter = threading.Event()
        elapsed = 0.0
        while True:
            waiter.wait(self.poll_interval)
            elapsed += self.poll_interval
            if elapsed >= self.drain_timeout:
                print("Timeout waiting for tasks to complete, forcing shutdown")
                return
            if not self.task_service.has_active_tasks():
                print("All tasks completed")
                return