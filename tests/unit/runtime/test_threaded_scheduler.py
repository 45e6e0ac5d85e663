# tests/unit/runtime/test_threaded_scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
import time
from typing import Generator

import pytest

from namedtimers.core.errors import SchedulerError
from namedtimers.core.validations import MIN_PERIOD
from namedtimers.interfaces.protocols import Scheduler
from namedtimers.runtime.threaded import ThreadingScheduler

pytestmark = pytest.mark.realtime


@pytest.fixture
def scheduler() -> Generator[ThreadingScheduler, None, None]:
    sched = ThreadingScheduler()
    yield sched
    sched.shutdown()


def test_threading_scheduler_is_a_scheduler(scheduler: ThreadingScheduler) -> None:
    assert isinstance(scheduler, Scheduler)
    assert scheduler.daemon is True
    assert scheduler.pending == 0


def test_schedule_once_fires(scheduler: ThreadingScheduler) -> None:
    fired = threading.Event()
    scheduler.schedule_once(0.01, fired.set)

    assert fired.wait(timeout=1.0)
    time.sleep(0.01)
    assert scheduler.pending == 0


def test_cancel_once_prevents_run(scheduler: ThreadingScheduler) -> None:
    fired = threading.Event()
    handle = scheduler.schedule_once(0.05, fired.set)
    assert scheduler.pending == 1

    scheduler.cancel_once(handle)
    assert scheduler.pending == 0
    assert not fired.wait(timeout=0.15)


def test_repeating_fires_until_cancelled(scheduler: ThreadingScheduler) -> None:
    count = 0
    reached = threading.Event()
    lock = threading.Lock()

    def tick() -> None:
        nonlocal count
        with lock:
            count += 1
            if count >= 3:
                reached.set()

    handle = scheduler.schedule_repeating(0.02, tick)
    assert reached.wait(timeout=2.0)

    scheduler.cancel_repeating(handle)
    time.sleep(0.05)
    with lock:
        settled = count
    time.sleep(0.1)
    with lock:
        assert count == settled
    assert handle.cancelled()
    assert scheduler.pending == 0


def test_shutdown_cancels_and_refuses(scheduler: ThreadingScheduler) -> None:
    fired = threading.Event()
    scheduler.schedule_once(0.05, fired.set)
    scheduler.schedule_repeating(0.05, fired.set)

    scheduler.shutdown()
    assert scheduler.pending == 0
    assert not fired.wait(timeout=0.15)

    with pytest.raises(SchedulerError):
        scheduler.schedule_once(0.01, fired.set)
    with pytest.raises(SchedulerError):
        scheduler.schedule_repeating(0.01, fired.set)


def test_non_daemon_threads() -> None:
    sched = ThreadingScheduler(daemon=False)
    started = threading.Event()
    handle = sched.schedule_once(0.5, started.set)
    assert handle._timer.daemon is False
    sched.shutdown()


def test_repeating_stays_on_period_boundaries(scheduler: ThreadingScheduler) -> None:
    """Runs land on multiples of the period from the start, not on callback end times."""
    period = 0.05
    runs = []
    done = threading.Event()

    def tick() -> None:
        runs.append(time.monotonic())
        time.sleep(0.01)
        if len(runs) >= 6:
            done.set()

    start = time.monotonic()
    handle = scheduler.schedule_repeating(period, tick)
    assert done.wait(timeout=2.0)
    scheduler.cancel_repeating(handle)

    # A re-arm from the callback's end would have drifted by 6 * 0.01s.
    assert runs[5] - start == pytest.approx(6 * period, abs=0.03)


def test_repeating_skips_missed_ticks(scheduler: ThreadingScheduler) -> None:
    """A callback that overruns its period does not trigger a burst of catch-up runs."""
    period = 0.1
    runs = []
    slow_end = []
    done = threading.Event()

    def tick() -> None:
        runs.append(time.monotonic())
        if len(runs) == 1:
            time.sleep(0.25)
            slow_end.append(time.monotonic())
        if len(runs) >= 3:
            done.set()

    start = time.monotonic()
    handle = scheduler.schedule_repeating(period, tick)
    assert done.wait(timeout=2.0)
    scheduler.cancel_repeating(handle)

    # The ticks due at 0.2s and 0.3s were missed; the next run is at 0.4s.
    assert runs[1] - slow_end[0] > 0.02
    assert runs[1] - start == pytest.approx(4 * period, abs=0.04)
    assert runs[2] - runs[1] == pytest.approx(period, abs=0.04)


def test_zero_period_is_clamped(scheduler: ThreadingScheduler) -> None:
    count = 0
    reached = threading.Event()
    lock = threading.Lock()

    def tick() -> None:
        nonlocal count
        with lock:
            count += 1
            if count >= 5:
                reached.set()

    handle = scheduler.schedule_repeating(0.0, tick)
    assert reached.wait(timeout=2.0)
    scheduler.cancel_repeating(handle)
    assert handle._period == MIN_PERIOD
