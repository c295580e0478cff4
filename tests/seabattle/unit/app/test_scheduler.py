from __future__ import annotations

import pytest

from seabattle.app.scheduler import Scheduler


def test_scheduler_call_later_runs_when_due() -> None:
    scheduler = Scheduler()
    calls: list[str] = []
    scheduler.call_later(0.2, lambda: calls.append("once"))

    assert scheduler.advance(0.1) == 0
    assert calls == []
    assert scheduler.advance(0.1) == 1
    assert calls == ["once"]
    assert scheduler.advance(1.0) == 0


def test_scheduler_cancel_prevents_execution() -> None:
    scheduler = Scheduler()
    calls: list[str] = []
    task_id = scheduler.call_later(0.1, lambda: calls.append("never"))
    assert scheduler.is_pending(task_id)
    scheduler.cancel(task_id)
    assert not scheduler.is_pending(task_id)
    assert scheduler.advance(0.2) == 0
    assert calls == []


def test_scheduler_cancel_releases_task_and_pending_count() -> None:
    scheduler = Scheduler()
    calls: list[str] = []
    first = scheduler.call_later(0.1, lambda: calls.append("first"))
    scheduler.call_later(0.3, lambda: calls.append("second"))
    assert scheduler.pending_count == 2

    scheduler.cancel(first)
    assert scheduler.pending_count == 1
    scheduler.cancel(first)
    assert scheduler.pending_count == 1

    assert scheduler.advance(1.0) == 1
    assert calls == ["second"]
    assert scheduler.pending_count == 0


def test_scheduler_repeated_schedule_and_cancel_does_not_accumulate_tasks() -> None:
    scheduler = Scheduler()
    for _ in range(50):
        scheduler.cancel(scheduler.call_later(5.0, lambda: None))
    assert scheduler.pending_count == 0


def test_scheduler_runs_tasks_scheduled_by_callbacks_when_due() -> None:
    scheduler = Scheduler()
    calls: list[float] = []

    def chained() -> None:
        calls.append(scheduler.now_seconds)
        if len(calls) < 3:
            scheduler.call_later(1.0, chained)

    scheduler.call_later(1.0, chained)
    scheduler.advance(1.0)
    scheduler.advance(1.0)
    scheduler.advance(1.0)
    assert calls == [1.0, 2.0, 3.0]


def test_scheduler_validates_time_arguments() -> None:
    scheduler = Scheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-1.0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-0.1)
