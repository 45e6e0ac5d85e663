# namedtimers/runtime/manual.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import heapq
from typing import List, Optional, Tuple

from namedtimers.core.validations import clamp_period, to_seconds
from namedtimers.interfaces.types import Duration, ScheduledFunc


class _ManualEntry:
    """
    Internal record of one schedule on the virtual clock.
    """

    __slots__ = ("callback", "period", "cancelled")

    def __init__(self, callback: ScheduledFunc, period: Optional[float]) -> None:
        self.callback = callback
        self.period = period
        self.cancelled = False


class ManualScheduler:
    """
    Scheduler driven by a virtual clock that only moves when advance() is
    called. Nothing runs in the background, which makes timer behaviour
    deterministic in tests and simulations.

    Due callbacks run in due-time order; callbacks due at the same instant
    run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = 0
        self._heap: List[Tuple[float, int, _ManualEntry]] = []

    @property
    def now(self) -> float:
        """
        Current virtual time in seconds.
        """
        return self._now

    @property
    def pending(self) -> int:
        """
        Number of schedules still waiting to run.
        """
        return sum(1 for _, _, entry in self._heap if not entry.cancelled)

    def schedule_once(self, delay: float, callback: ScheduledFunc) -> _ManualEntry:
        entry = _ManualEntry(callback, None)
        self._push(self._now + delay, entry)
        return entry

    def schedule_repeating(self, period: float, callback: ScheduledFunc) -> _ManualEntry:
        period = clamp_period(period)
        entry = _ManualEntry(callback, period)
        self._push(self._now + period, entry)
        return entry

    def cancel_once(self, handle: _ManualEntry) -> None:
        handle.cancelled = True

    def cancel_repeating(self, handle: _ManualEntry) -> None:
        handle.cancelled = True

    def advance(self, duration: Duration) -> int:
        """
        Move the clock forward, running every callback that falls due on the
        way, including re-armed repetitions.

        Callbacks run unguarded. If one raises, the exception propagates and
        the clock stays at that callback's due time, so a later advance()
        resumes with the entries still due.

        :param duration: Seconds or timedelta to move forward.
        :return: Number of callbacks run.
        """
        target = self._now + to_seconds(duration)
        ran = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, entry = heapq.heappop(self._heap)
            if entry.cancelled:
                continue
            self._now = due
            if entry.period is not None:
                self._push(due + entry.period, entry)
            else:
                entry.cancelled = True
            entry.callback()
            ran += 1
        self._now = target
        return ran

    def _push(self, due: float, entry: _ManualEntry) -> None:
        heapq.heappush(self._heap, (due, self._counter, entry))
        self._counter += 1
