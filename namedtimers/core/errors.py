# namedtimers/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import Any, Dict, Optional


class TimerRegistryError(Exception):
    """
    Base exception class for errors raised by the timer registry library.

    :param message: Human readable description.
    :param details: Optional extra context about the failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class InvalidCallbackError(TimerRegistryError, TypeError):
    """
    Raised when a timer is created with a callback that cannot be called.
    """

    def __init__(self, message: str, timer_id: Optional[str] = None, registry_id: Optional[str] = None) -> None:
        self.timer_id = timer_id
        self.registry_id = registry_id
        super().__init__(message)


# Name used by the public contract for the same error.
InvalidCallback = InvalidCallbackError


class CallbackFailure(TimerRegistryError):
    """
    The captured error of a timer callback that raised while being run by the
    scheduler. Never propagated to callers; the default error handler logs it.
    """

    def __init__(self, timer_id: str, error: BaseException, registry_id: Optional[str] = None) -> None:
        self.timer_id = timer_id
        self.error = error
        self.registry_id = registry_id
        super().__init__(
            f"TimerRegistry({registry_id}): Error in timer {timer_id!r}: {error!r}",
            {"error_type": type(error).__name__},
        )


class SchedulerError(TimerRegistryError):
    """
    Raised when a scheduler cannot accept new work, e.g. after shutdown or
    without an event loop to schedule on.
    """
