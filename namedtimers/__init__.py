"""
Named-handle registry over one-shot and repeating timer primitives.

Timers are created, refreshed, paused, resumed and cleared by a stable string
id. A callback that raises is reported to an error handler and its timer is
cleared, so one faulty callback cannot crash the host or stop sibling timers.
"""

from .core.config import RegistryConfig
from .core.errors import (
    CallbackFailure,
    InvalidCallback,
    InvalidCallbackError,
    SchedulerError,
    TimerRegistryError,
)
from .core.ids import generate_id
from .core.registry import PausedInterval, TimerRegistry
from .interfaces.protocols import Scheduler
from .runtime.async_support import AsyncioScheduler
from .runtime.manual import ManualScheduler
from .runtime.threaded import ThreadingScheduler

__version__ = "0.1.0"

__all__ = [
    # Registry
    "TimerRegistry",
    "PausedInterval",
    "RegistryConfig",
    "generate_id",
    # Schedulers
    "Scheduler",
    "ThreadingScheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    # Errors
    "TimerRegistryError",
    "InvalidCallbackError",
    "InvalidCallback",
    "CallbackFailure",
    "SchedulerError",
]
