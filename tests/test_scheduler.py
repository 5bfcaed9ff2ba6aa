from datetime import datetime, timedelta, timezone

import pytest

from slicesched.models import Task
from slicesched.scheduler import (
    FIFOScheduler,
    SchedulerManager,
    SRTFScheduler,
    UnsupportedStrategyError,
)

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _at(ms):
    return BASE + timedelta(milliseconds=ms)


def _run(scheduler, tasks, bandwidth):
    for task in tasks:
        scheduler.add_task(task)
    result = scheduler.schedule(bandwidth)
    return [t.index for t in result], [t.remaining_time for t in result]


def test_fifo_name():
    assert FIFOScheduler().name == "FIFO"


def test_srtf_name():
    assert SRTFScheduler().name == "SRTF"


@pytest.mark.parametrize(
    "tasks, bandwidth, indexes, remains",
    [
        ([Task(0, 3, False, _at(0))], 5, [0], [0]),
        ([Task(0, 2, False, _at(0)), Task(1, 3, False, _at(1))], 5, [0, 1], [0, 0]),
        (
            [Task(0, 3, False, _at(0)), Task(1, 4, False, _at(1)), Task(2, 2, False, _at(2))],
            5,
            [0, 1],
            [0, 2],
        ),
        ([Task(0, 0, True, _at(0)), Task(1, 3, False, _at(1))], 5, [1], [0]),
    ],
    ids=["single", "multiple-under", "multiple-over", "skip-completed"],
)
def test_fifo_schedule(tasks, bandwidth, indexes, remains):
    assert _run(FIFOScheduler(), tasks, bandwidth) == (indexes, remains)


@pytest.mark.parametrize(
    "tasks, bandwidth, indexes, remains",
    [
        ([Task(0, 5), Task(1, 2), Task(2, 8)], 5, [1, 0], [0, 2]),
        ([Task(1, 3), Task(0, 3)], 5, [0, 1], [0, 1]),
        ([Task(0, 0, True), Task(1, 3)], 5, [1], [0]),
    ],
    ids=["by-remaining", "tie-by-index", "skip-completed"],
)
def test_srtf_schedule(tasks, bandwidth, indexes, remains):
    assert _run(SRTFScheduler(), tasks, bandwidth) == (indexes, remains)


def test_schedule_requeues_unfinished():
    fifo = FIFOScheduler()
    _run(fifo, [Task(0, 3, False, _at(0)), Task(1, 4, False, _at(1)), Task(2, 2, False, _at(2))], 5)
    assert len(fifo) == 2
    second = fifo.schedule(5)
    assert [(t.index, t.remaining_time) for t in second] == [(1, 0), (2, 0)]
    assert len(fifo) == 0


def test_add_task_copies():
    fifo = FIFOScheduler()
    task = Task(0, 4, False, _at(0))
    fifo.add_task(task)
    fifo.schedule(2)
    assert task.remaining_time == 4


def test_zero_bandwidth_schedules_nothing():
    srtf = SRTFScheduler()
    srtf.add_task(Task(0, 3))
    assert srtf.schedule(0) == []
    assert len(srtf) == 1


def test_next_task_empty_returns_none():
    assert FIFOScheduler().next_task() is None


def test_next_task_order():
    srtf = SRTFScheduler()
    for task in [Task(0, 9), Task(1, 1), Task(2, 4)]:
        srtf.add_task(task)
    assert [srtf.next_task().index for _ in range(3)] == [1, 2, 0]
    assert srtf.next_task() is None


def test_manager_defaults():
    manager = SchedulerManager()
    assert manager.current().name == "FIFO"
    assert sorted(manager.available_strategies()) == ["FIFO", "SRTF"]


def test_manager_switch():
    manager = SchedulerManager()
    manager.switch("SRTF")
    assert manager.current().name == "SRTF"
    with pytest.raises(UnsupportedStrategyError):
        manager.switch("INVALID")
    assert manager.current().name == "SRTF"


def test_manager_switch_migrates_tasks():
    manager = SchedulerManager()
    for i, (remaining, ms) in enumerate([(5, 0), (2, 1), (8, 2)]):
        manager.current().add_task(Task(i, remaining, False, _at(ms)))
    manager.switch("SRTF")
    assert len(manager.current()) == 3
    result = manager.current().schedule(5)
    assert [(t.index, t.remaining_time) for t in result] == [(1, 0), (0, 2)]
    manager.switch("FIFO")
    assert len(manager.current()) == 2
    assert manager.current().next_task().index == 0


def test_manager_switch_same_keeps_tasks():
    manager = SchedulerManager()
    manager.current().add_task(Task(0, 3))
    manager.switch("FIFO")
    assert len(manager.current()) == 1