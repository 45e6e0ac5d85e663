# namedtimers/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from datetime import timedelta
from typing import Any, Callable, Union

TimerID = str
RegistryID = str
Duration = Union[int, float, timedelta]

# Callback Types
TimerCallback = Callable[[], Any]
ErrorHandler = Callable[[BaseException, TimerID], None]
ScheduledFunc = Callable[[], None]
