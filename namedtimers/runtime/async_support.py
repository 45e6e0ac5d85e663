# namedtimers/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
from typing import Optional

from namedtimers.core.errors import SchedulerError
from namedtimers.core.validations import clamp_period
from namedtimers.interfaces.types import ScheduledFunc


class _AsyncRepeatingHandle:
    """
    Internal handle for a repeating schedule on an event loop. Each run
    re-arms with loop.call_at() on the next period boundary.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, period: float, callback: ScheduledFunc) -> None:
        self._loop = loop
        self._period = period
        self._callback = callback
        self._cancelled = False
        self._next_run = loop.time() + period
        self._timer_handle: Optional[asyncio.TimerHandle] = None

    def start(self) -> None:
        self._timer_handle = self._loop.call_at(self._next_run, self._run)

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        if self._cancelled:
            return
        try:
            self._callback()
        finally:
            if not self._cancelled:
                now = self._loop.time()
                self._next_run += self._period
                while self._next_run <= now:
                    self._next_run += self._period
                self._timer_handle = self._loop.call_at(self._next_run, self._run)


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop. All methods must be called from
    the loop's thread; callbacks run on the loop between other tasks.

    :param loop: Loop to schedule on. When omitted, the running loop at the
                 first scheduling call is used and kept.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                raise SchedulerError("AsyncioScheduler needs a running event loop or an explicit loop") from None
        if self._loop.is_closed():
            raise SchedulerError("AsyncioScheduler event loop is closed")
        return self._loop

    def schedule_once(self, delay: float, callback: ScheduledFunc) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay, callback)

    def schedule_repeating(self, period: float, callback: ScheduledFunc) -> _AsyncRepeatingHandle:
        handle = _AsyncRepeatingHandle(self._get_loop(), clamp_period(period), callback)
        handle.start()
        return handle

    def cancel_once(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def cancel_repeating(self, handle: _AsyncRepeatingHandle) -> None:
        handle.cancel()
