"""
Host timer primitives the registry can schedule on.
"""

from .async_support import AsyncioScheduler
from .manual import ManualScheduler
from .threaded import ThreadingScheduler

__all__ = ["ThreadingScheduler", "AsyncioScheduler", "ManualScheduler"]
