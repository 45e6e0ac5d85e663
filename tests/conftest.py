# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from typing import Callable, List
from unittest.mock import MagicMock

import pytest

from namedtimers.core.registry import TimerRegistry
from namedtimers.runtime.manual import ManualScheduler


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "realtime: mark test as depending on the wall clock")


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    """A virtual-clock scheduler that only moves when advanced."""
    return ManualScheduler()


@pytest.fixture
def error_handler() -> MagicMock:
    """A registry-wide error handler mock."""
    return MagicMock(name="global_on_error")


@pytest.fixture
def registry(manual_scheduler: ManualScheduler, error_handler: MagicMock) -> TimerRegistry:
    """A registry on the virtual clock with a mocked global error handler."""
    return TimerRegistry(id="test-registry", on_error=error_handler, scheduler=manual_scheduler)


@pytest.fixture
def mock_scheduler() -> MagicMock:
    """A scheduler mock whose schedule calls return distinct handles."""
    scheduler = MagicMock(name="scheduler")
    scheduler.schedule_once.side_effect = lambda delay, cb: MagicMock(name="once_handle")
    scheduler.schedule_repeating.side_effect = lambda period, cb: MagicMock(name="repeating_handle")
    return scheduler


@pytest.fixture
def recorder() -> Callable[[str], Callable[[], None]]:
    """
    Factory of callbacks that append their label to a shared list, exposed as
    recorder.calls.
    """
    calls: List[str] = []

    def _make(label: str) -> Callable[[], None]:
        def _callback() -> None:
            calls.append(label)

        return _callback

    _make.calls = calls
    return _make


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining timer threads after each test
    for thread in threading.enumerate():
        if isinstance(thread, threading.Timer) and thread.is_alive():
            thread.cancel()
            thread.join(timeout=1.0)
