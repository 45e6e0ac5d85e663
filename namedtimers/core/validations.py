# namedtimers/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

from namedtimers.core.errors import InvalidCallbackError

# Smallest repeating period, in seconds, any scheduler will honour.
MIN_PERIOD = 0.001


def validate_callback(callback: Any, kind: str, timer_id: str, registry_id: Optional[str] = None) -> None:
    """
    Reject a callback argument that cannot be called.

    :param callback: The object supplied as a timer callback.
    :param kind: "timeout" or "interval", used in the error message.
    :param timer_id: The id the timer would have been registered under.
    :param registry_id: Id of the owning registry, for the error message.
    :raises InvalidCallbackError: If callback is not callable.
    """
    if not callable(callback):
        raise InvalidCallbackError(
            f"TimerRegistry({registry_id}): callback for {kind} {timer_id!r} must be callable.",
            timer_id=timer_id,
            registry_id=registry_id,
        )


def to_seconds(duration: Any, name: str = "duration") -> float:
    """
    Normalize a duration given as seconds or a timedelta to float seconds.

    :raises TypeError: If the value is neither a number nor a timedelta.
    :raises ValueError: If the value is negative.
    """
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    elif isinstance(duration, (int, float)) and not isinstance(duration, bool):
        seconds = float(duration)
    else:
        raise TypeError(f"{name} must be a number of seconds or a timedelta, got {type(duration).__name__}")
    if seconds < 0:
        raise ValueError(f"{name} must not be negative")
    return seconds


def clamp_period(period: float) -> float:
    """
    Raise a repeating period to MIN_PERIOD so a zero period cannot spin.
    """
    return max(period, MIN_PERIOD)
