# slicesched

slicesched is a small HTTP service for time-sliced tasks. You submit a list of task durations. Once a second the service runs one scheduling cycle. Each cycle hands out a fixed number of time units, called the bandwidth, to the queued tasks and records what ran. Two strategies are available:

- **FIFO**: tasks run in the order they were created.
- **SRTF**: the task with the shortest remaining time runs first. Ties go to the lower task index.

FIFO is the default. When you switch strategy, the unfinished tasks move to the new scheduler.

## Installation

```
pip install .
```

## Running the server

```
slicesched --port 8080 --bandwidth 5
```

- `--port` (or `-port`) sets the port to listen on. The default is `8080`.
- `--bandwidth` (or `-bandwidth`) sets the number of time units handed out per cycle. The default is `5`.

If the server cannot bind the port, the command logs the error and exits with status 1.

On SIGINT (Ctrl+C) or SIGTERM the scheduling loop stops. The command then polls for up to ten seconds until no active tasks remain. Once the loop has stopped it runs no further cycles, so tasks still queued at that point are not run. The HTTP server then shuts down.

## HTTP API

Every response body is JSON, except the plain-text `404 page not found` for an unknown path. A request with the wrong method gets `405`. Error responses have the form `{"error": "<message>"}`.

### `POST /tasks`

The body is a JSON array of integer task durations:

```
curl -X POST localhost:8080/tasks -d '[3, 5, 2]'
```

Response:

```json
{"job_id":"1a2b3c4d","message":"Task submitted successfully","task_count":3}
```

An empty list, or a body that is not an array of integers, gets `400`.

### `GET /status`

The response has these fields:

- `current_time`: the number of cycles run so far.
- `schedule_history`: one entry per cycle that ran tasks. Each entry has `time`, `task_indexes` and `remaining_times`.
- `active_tasks`: the queued tasks, in priority order.
- `completed_tasks`: the finished tasks.
- `current_strategy`: `"FIFO"` or `"SRTF"`.

Each task entry has the keys `Index`, `RemainingTime`, `IsCompleted` and `CreatedTime` (an ISO 8601 timestamp).

### `POST /scheduler`

```
curl -X POST localhost:8080/scheduler -d '{"strategy": "SRTF"}'
```

Response:

```json
{"current_strategy":"SRTF","message":"Scheduler strategy switched to: SRTF"}
```

A missing, empty or unknown strategy gets `400`.

## Using the library

```python
from slicesched.services import TaskService

service = TaskService(5)
service.submit_tasks([3, 5, 2])
service.execute_scheduling_cycle()
status = service.status()
print(status.current_time, status.schedule_history)
```

- `TaskService.switch_scheduler(name)` changes strategy. It raises `slicesched.scheduler.UnsupportedStrategyError` for an unknown name.
- `SchedulerService(service).start()` runs the cycle loop on a background thread. The interval is `tick_interval`, one second by default. To end the loop, call `stop()` or `graceful_stop()`.
- `slicesched.scheduler` provides `FIFOScheduler`, `SRTFScheduler` and `SchedulerManager`. You can use them directly with tasks made by `slicesched.models.new_task`.
- `slicesched.handlers.create_app(TaskHandler(service))` returns the WSGI application that the command serves.

## Limitations

All state is held in memory. Submitted tasks, history and the current strategy are lost when the process exits. Nothing is saved to disk.

## Tests

```
pip install ".[test]"
pytest
```