# namedtimers/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Protocol, runtime_checkable

from namedtimers.interfaces.types import ScheduledFunc


@runtime_checkable
class Scheduler(Protocol):
    """
    Scheduler protocol for type checking.

    This is the host runtime's raw timer primitive. The registry never looks
    inside a handle; it only stores it and hands it back for cancellation.

    Methods:
        schedule_once(): Run a callback once after a delay; returns a handle.
        schedule_repeating(): Run a callback every period; returns a handle.
        cancel_once(): Cancel a handle returned by schedule_once().
        cancel_repeating(): Cancel a handle returned by schedule_repeating().

    Runtime Invariants:
    - Delays and periods are in seconds and never negative.
    - A handle stays valid until it is cancelled or, for one-shot handles, run.

    Error Handling:
    - Cancelling an already cancelled or already finished handle is a no-op.
    - Implementations raise SchedulerError when they cannot accept new work.
    """

    def schedule_once(self, delay: float, callback: ScheduledFunc) -> Any:
        """Schedule callback to run once after delay seconds."""
        ...

    def schedule_repeating(self, period: float, callback: ScheduledFunc) -> Any:
        """Schedule callback to run every period seconds until cancelled."""
        ...

    def cancel_once(self, handle: Any) -> None:
        """Cancel a pending one-shot schedule."""
        ...

    def cancel_repeating(self, handle: Any) -> None:
        """Cancel a repeating schedule."""
        ...
