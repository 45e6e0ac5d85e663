"""
Core package: the timer registry, its configuration, errors and id generation.
"""

from .config import RegistryConfig
from .errors import CallbackFailure, InvalidCallbackError, SchedulerError, TimerRegistryError
from .registry import PausedInterval, TimerRegistry

__all__ = [
    "TimerRegistry",
    "PausedInterval",
    "RegistryConfig",
    "TimerRegistryError",
    "InvalidCallbackError",
    "CallbackFailure",
    "SchedulerError",
]
