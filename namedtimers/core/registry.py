# namedtimers/core/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

from namedtimers.core.config import RegistryConfig
from namedtimers.core.errors import CallbackFailure
from namedtimers.core.ids import generate_id
from namedtimers.core.validations import to_seconds, validate_callback
from namedtimers.interfaces.protocols import Scheduler
from namedtimers.interfaces.types import Duration, ErrorHandler, RegistryID, ScheduledFunc, TimerCallback, TimerID
from namedtimers.runtime.threaded import ThreadingScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PausedInterval:
    """
    Parameters of an interval that was paused, kept so it can be resumed.
    """

    callback: TimerCallback
    interval: float
    on_error: Optional[ErrorHandler] = None


class _ActiveTimer:
    """
    Internal record of a scheduled timer. The record object itself is the
    identity the guarded callback checks against, so a callback whose timer
    was cancelled or replaced never runs.
    """

    __slots__ = ("callback", "duration", "on_error", "handle")

    def __init__(self, callback: TimerCallback, duration: float, on_error: Optional[ErrorHandler]) -> None:
        self.callback = callback
        self.duration = duration
        self.on_error = on_error
        self.handle: Any = None


class TimerRegistry:
    """
    Registry of one-shot (timeout) and repeating (interval) timers addressed
    by string ids rather than scheduler handles.

    Timeouts and intervals live in separate namespaces, so the same id may be
    used for one of each. A callback that raises is reported to its error
    handler and its timer is then cleared; the exception never reaches the
    scheduler and never affects other timers.

    Clear, pause and resume on an unknown id are no-ops.

    :param id: Id of this registry, used in diagnostics. Generated if omitted.
    :param on_error: Registry-wide handler called as on_error(error, timer_id)
                     when a callback raises. Defaults to logging the error.
    :param scheduler: Host timer primitive. Defaults to a ThreadingScheduler.
    :param config: Optional RegistryConfig; explicit arguments win over it.
    """

    def __init__(
        self,
        id: Optional[RegistryID] = None,
        on_error: Optional[ErrorHandler] = None,
        scheduler: Optional[Scheduler] = None,
        config: Optional[RegistryConfig] = None,
    ) -> None:
        self._config = config if config is not None else RegistryConfig()
        self._id = id or self._config.id or generate_id(self._config.id_length)
        if scheduler is None:
            scheduler = ThreadingScheduler(daemon=self._config.daemon_threads)
        self._scheduler = scheduler
        self._timeouts: Dict[TimerID, _ActiveTimer] = {}
        self._intervals: Dict[TimerID, _ActiveTimer] = {}
        self._paused: Dict[TimerID, PausedInterval] = {}
        # Reentrant: callbacks run on timer threads may call back into the registry.
        self._lock = threading.RLock()

        if callable(on_error):
            self._on_error: ErrorHandler = on_error
        else:
            self._on_error = self._log_error

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------
    def create_timeout(
        self,
        callback: TimerCallback,
        timeout: Duration,
        id: Optional[TimerID] = None,
        refresh: bool = True,
        on_error: Optional[ErrorHandler] = None,
    ) -> TimerID:
        """
        Schedule callback to run once after timeout.

        With refresh=True an active timeout under the same id is cancelled and
        replaced. With refresh=False an active timeout under the id is left
        running and this call schedules nothing.

        :param callback: Zero-argument callable.
        :param timeout: Delay in seconds or as a timedelta.
        :param id: Timer id; generated if omitted.
        :param refresh: Replace an existing active timeout with this id.
        :param on_error: Handler for this timer, overriding the registry's.
        :return: The timer id used.
        :raises InvalidCallbackError: If callback is not callable.
        """
        timer_id = id or self._new_id()
        validate_callback(callback, "timeout", timer_id, self._id)
        delay = to_seconds(timeout, "timeout")

        with self._lock:
            if refresh and timer_id in self._timeouts:
                logger.debug("TimerRegistry(%s): refreshing timeout %r", self._id, timer_id)
                self._cancel_timeout(timer_id)

            if timer_id in self._timeouts:
                logger.debug("TimerRegistry(%s): timeout %r already active, not replaced", self._id, timer_id)
                return timer_id

            record = _ActiveTimer(callback, delay, on_error)
            self._timeouts[timer_id] = record
            try:
                record.handle = self._scheduler.schedule_once(delay, self._guard(timer_id, record, one_shot=True))
            except Exception:
                del self._timeouts[timer_id]
                raise
            logger.debug("TimerRegistry(%s): created timeout %r (%.3fs)", self._id, timer_id, delay)
        return timer_id

    def create_interval(
        self,
        callback: TimerCallback,
        interval: Duration,
        id: Optional[TimerID] = None,
        refresh: bool = True,
        on_error: Optional[ErrorHandler] = None,
    ) -> TimerID:
        """
        Schedule callback to run every interval until cleared or paused.

        Refresh only concerns an *active* interval under the same id. A paused
        record under the id is not what refresh replaces; it is dropped only
        because an id is never both active and paused, so scheduling a new
        interval under a paused id discards the paused record.

        :param callback: Zero-argument callable.
        :param interval: Period in seconds or as a timedelta.
        :param id: Timer id; generated if omitted.
        :param refresh: Replace an existing active interval with this id.
        :param on_error: Handler for this timer, overriding the registry's.
        :return: The timer id used.
        :raises InvalidCallbackError: If callback is not callable.
        """
        timer_id = id or self._new_id()
        validate_callback(callback, "interval", timer_id, self._id)
        period = to_seconds(interval, "interval")

        with self._lock:
            if refresh and timer_id in self._intervals:
                logger.debug("TimerRegistry(%s): refreshing interval %r", self._id, timer_id)
                self._cancel_interval(timer_id)

            if timer_id in self._intervals:
                logger.debug("TimerRegistry(%s): interval %r already active, not replaced", self._id, timer_id)
                return timer_id

            self._start_interval(timer_id, _ActiveTimer(callback, period, on_error))
        return timer_id

    # -------------------------------------------------------------------------
    # Clearing, pausing, resuming
    # -------------------------------------------------------------------------
    def clear_timeout(self, id: TimerID) -> None:
        """
        Cancel and forget the active timeout with this id, if any.
        """
        with self._lock:
            if self._cancel_timeout(id):
                logger.debug("TimerRegistry(%s): cleared timeout %r", self._id, id)

    def clear_interval(self, id: TimerID) -> None:
        """
        Cancel and forget the interval with this id, whether active or paused.
        """
        with self._lock:
            cancelled = self._cancel_interval(id)
            unpaused = self._paused.pop(id, None) is not None
            if cancelled or unpaused:
                logger.debug("TimerRegistry(%s): cleared interval %r", self._id, id)

    def pause_interval(self, id: TimerID) -> None:
        """
        Stop an active interval but remember it so resume_interval() can
        restart it. Pausing a paused or unknown interval does nothing.
        """
        with self._lock:
            record = self._intervals.get(id)
            if record is None:
                return
            self._cancel_interval(id)
            self._paused[id] = PausedInterval(record.callback, record.duration, record.on_error)
            logger.debug("TimerRegistry(%s): paused interval %r", self._id, id)

    def resume_interval(
        self,
        id: TimerID,
        callback: Optional[TimerCallback] = None,
        interval: Optional[Duration] = None,
    ) -> None:
        """
        Restart a paused interval. Does nothing unless the id is paused.

        The callback, period and error handler in effect when the interval was
        paused are reused. Passing callback or interval replaces the stored
        value for the resumed timer; nothing checks that they match what was
        paused, so callers supplying them are responsible for consistency.

        :raises InvalidCallbackError: If an explicit callback is not callable.
            The interval then stays paused.
        """
        with self._lock:
            paused = self._paused.get(id)
            if paused is None:
                return
            self.create_interval(
                callback if callback is not None else paused.callback,
                interval if interval is not None else paused.interval,
                id=id,
                refresh=False,
                on_error=paused.on_error,
            )
            self._paused.pop(id, None)
            logger.debug("TimerRegistry(%s): resumed interval %r", self._id, id)

    def clear_all(self, include_paused: Optional[bool] = None) -> None:
        """
        Cancel every active interval and timeout.

        :param include_paused: Also forget paused intervals. When None the
            registry config decides (purge_paused_on_clear_all, True by default).
        """
        if include_paused is None:
            include_paused = self._config.purge_paused_on_clear_all

        with self._lock:
            for timer_id in list(self._intervals):
                self.clear_interval(timer_id)
            for timer_id in list(self._timeouts):
                self.clear_timeout(timer_id)
            if include_paused:
                self._paused.clear()
            logger.debug("TimerRegistry(%s): cleared all timers (include_paused=%s)", self._id, include_paused)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    @property
    def id(self) -> RegistryID:
        return self._id

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def timeout_ids(self) -> FrozenSet[TimerID]:
        with self._lock:
            return frozenset(self._timeouts)

    @property
    def interval_ids(self) -> FrozenSet[TimerID]:
        with self._lock:
            return frozenset(self._intervals)

    @property
    def paused_ids(self) -> FrozenSet[TimerID]:
        with self._lock:
            return frozenset(self._paused)

    def has_timeout(self, id: TimerID) -> bool:
        with self._lock:
            return id in self._timeouts

    def has_interval(self, id: TimerID) -> bool:
        with self._lock:
            return id in self._intervals

    def is_paused(self, id: TimerID) -> bool:
        with self._lock:
            return id in self._paused

    def __len__(self) -> int:
        with self._lock:
            return len(self._timeouts) + len(self._intervals)

    def __repr__(self) -> str:
        with self._lock:
            return (
                f"TimerRegistry(id={self._id!r}, timeouts={len(self._timeouts)}, "
                f"intervals={len(self._intervals)}, paused={len(self._paused)})"
            )

    def __enter__(self) -> "TimerRegistry":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear_all(include_paused=True)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _new_id(self) -> TimerID:
        return generate_id(self._config.id_length)

    def _start_interval(self, timer_id: TimerID, record: _ActiveTimer) -> None:
        # An active interval supersedes a paused one under the same id.
        self._paused.pop(timer_id, None)
        self._intervals[timer_id] = record
        try:
            record.handle = self._scheduler.schedule_repeating(
                record.duration, self._guard(timer_id, record, one_shot=False)
            )
        except Exception:
            del self._intervals[timer_id]
            raise
        logger.debug("TimerRegistry(%s): created interval %r (%.3fs)", self._id, timer_id, record.duration)

    def _cancel_timeout(self, timer_id: TimerID) -> bool:
        record = self._timeouts.pop(timer_id, None)
        if record is None:
            return False
        self._scheduler.cancel_once(record.handle)
        return True

    def _cancel_interval(self, timer_id: TimerID) -> bool:
        record = self._intervals.pop(timer_id, None)
        if record is None:
            return False
        self._scheduler.cancel_repeating(record.handle)
        return True

    def _guard(self, timer_id: TimerID, record: _ActiveTimer, one_shot: bool) -> ScheduledFunc:
        """
        Wrap a timer's callback into the function handed to the scheduler.

        The wrapper runs only while its record is still the current one for the
        id. A one-shot record is dropped before its callback runs. If the
        callback raises, the error goes to the timer's handler (or the
        registry's) and the id is then cleared from both namespaces.
        """
        table = self._timeouts if one_shot else self._intervals

        def run() -> None:
            with self._lock:
                if table.get(timer_id) is not record:
                    return
                if one_shot:
                    del table[timer_id]
            try:
                record.callback()
            except Exception as error:
                self._report(error, timer_id, record.on_error)
                self.clear_interval(timer_id)
                self.clear_timeout(timer_id)

        return run

    def _report(self, error: Exception, timer_id: TimerID, on_error: Optional[ErrorHandler]) -> None:
        handler = on_error if callable(on_error) else self._on_error
        try:
            handler(error, timer_id)
        except Exception:
            logger.exception("TimerRegistry(%s): error handler for timer %r raised", self._id, timer_id)

    def _log_error(self, error: BaseException, timer_id: TimerID) -> None:
        failure = CallbackFailure(timer_id, error, registry_id=self._id)
        logger.error("%s", failure.message, exc_info=(type(error), error, error.__traceback__))
