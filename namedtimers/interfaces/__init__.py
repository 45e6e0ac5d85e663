"""
Protocols and type aliases shared by the registry and the schedulers.
"""

from .protocols import Scheduler

__all__ = ["Scheduler"]
