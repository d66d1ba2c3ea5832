"""Shared test fixtures.

Provides an offscreen QApplication, a manually driven scheduler, and storage
backed by a temporary SQLite file.
"""

import os
from typing import Callable, Dict, List, Tuple

import pytest
from PySide6.QtWidgets import QApplication

from core.config_store import ConfigStore
from core.models import Configuration
from core.scheduler import Scheduler, TICK_INTERVAL_MS
from core.storage import Storage
from core.timer_engine import SessionController


class FakeScheduler(Scheduler):
    """Scheduler whose timers only fire when the test calls fire()."""

    def __init__(self):
        self.callbacks: Dict[int, Callable[[], None]] = {}
        self.started: List[Tuple[int, int]] = []
        self.cancelled: List[int] = []
        self._next_handle = 1
        self.max_active = 0

    def start_repeating(self, callback, interval_ms=TICK_INTERVAL_MS):
        handle = self._next_handle
        self._next_handle += 1
        self.callbacks[handle] = callback
        self.started.append((handle, interval_ms))
        self.max_active = max(self.max_active, len(self.callbacks))
        return handle

    def cancel(self, handle):
        self.cancelled.append(handle)
        self.callbacks.pop(handle, None)

    @property
    def active(self) -> int:
        return len(self.callbacks)

    def fire(self, times: int = 1):
        """Deliver `times` ticks to every active timer."""
        for _ in range(times):
            for callback in list(self.callbacks.values()):
                callback()


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """A QApplication for the whole test session, without a display."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def storage(tmp_path) -> Storage:
    return Storage(tmp_path / "test.db")


@pytest.fixture()
def config_store(storage) -> ConfigStore:
    return ConfigStore(storage)


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def make_controller(config_store, scheduler):
    """Build a SessionController, optionally with a stored configuration."""

    def _make(**settings) -> SessionController:
        if settings:
            config_store.save(Configuration().merged(**settings))
        return SessionController(config_store, scheduler)

    return _make


@pytest.fixture()
def controller(make_controller) -> SessionController:
    return make_controller()
