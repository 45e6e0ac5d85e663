# namedtimers/runtime/threaded.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
import time
from typing import Optional, Set, Union

from namedtimers.core.errors import SchedulerError
from namedtimers.core.validations import clamp_period
from namedtimers.interfaces.types import ScheduledFunc


class _OnceHandle:
    """
    Internal handle for a one-shot schedule backed by a single threading.Timer.
    """

    def __init__(self, owner: "ThreadingScheduler", delay: float, callback: ScheduledFunc) -> None:
        self._owner = owner
        self._callback = callback
        self._timer = threading.Timer(delay, self._run)
        self._timer.daemon = owner.daemon

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()
        self._owner._forget(self)

    def _run(self) -> None:
        self._owner._forget(self)
        self._callback()


class _RepeatingHandle:
    """
    Internal handle for a repeating schedule. Each run arms a fresh
    threading.Timer aimed at the next multiple of the period after the start
    time, so slow callbacks do not make the schedule drift.
    """

    def __init__(self, owner: "ThreadingScheduler", period: float, callback: ScheduledFunc) -> None:
        self._owner = owner
        self._period = period
        self._callback = callback
        self._lock = threading.Lock()
        self._cancelled = False
        self._timer: Optional[threading.Timer] = None
        self._next_run = time.monotonic() + period

    def start(self) -> None:
        self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._owner._forget(self)

    def cancelled(self) -> bool:
        return self._cancelled

    def _arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            delay = max(0.0, self._next_run - time.monotonic())
            self._timer = threading.Timer(delay, self._run)
            self._timer.daemon = self._owner.daemon
            self._timer.start()

    def _run(self) -> None:
        with self._lock:
            if self._cancelled:
                return
        try:
            self._callback()
        finally:
            now = time.monotonic()
            self._next_run += self._period
            if self._next_run <= now:
                # Missed ticks are skipped, not replayed.
                missed = int((now - self._next_run) // self._period) + 1
                self._next_run += missed * self._period
            self._arm()


_Handle = Union[_OnceHandle, _RepeatingHandle]


class ThreadingScheduler:
    """
    Scheduler backed by threading.Timer. Callbacks run on timer threads, one
    thread per pending run.

    :param daemon: Whether timer threads are daemon threads, so pending timers
                   do not keep the interpreter alive.
    """

    def __init__(self, daemon: bool = True) -> None:
        self.daemon = daemon
        self._lock = threading.Lock()
        self._pending: Set[_Handle] = set()
        self._shutdown = False

    def schedule_once(self, delay: float, callback: ScheduledFunc) -> _OnceHandle:
        handle = _OnceHandle(self, delay, callback)
        self._track(handle)
        handle.start()
        return handle

    def schedule_repeating(self, period: float, callback: ScheduledFunc) -> _RepeatingHandle:
        handle = _RepeatingHandle(self, clamp_period(period), callback)
        self._track(handle)
        handle.start()
        return handle

    def cancel_once(self, handle: _OnceHandle) -> None:
        handle.cancel()

    def cancel_repeating(self, handle: _RepeatingHandle) -> None:
        handle.cancel()

    @property
    def pending(self) -> int:
        """
        Number of schedules that have not run (one-shot) or not been cancelled.
        """
        with self._lock:
            return len(self._pending)

    def shutdown(self) -> None:
        """
        Cancel every pending schedule and refuse new ones.
        """
        with self._lock:
            self._shutdown = True
            handles = list(self._pending)
        for handle in handles:
            handle.cancel()

    def _track(self, handle: _Handle) -> None:
        with self._lock:
            if self._shutdown:
                raise SchedulerError("ThreadingScheduler has been shut down")
            self._pending.add(handle)

    def _forget(self, handle: _Handle) -> None:
        with self._lock:
            self._pending.discard(handle)
