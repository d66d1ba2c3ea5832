"""
Repeating-timer scheduling for the Pomodoro Timer application.
"""

import logging
from abc import ABC, abstractmethod
from itertools import count
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)

# Default tick interval in milliseconds
TICK_INTERVAL_MS = 1000


class Scheduler(ABC):
    """Abstract base class for repeating-timer implementations."""

    @abstractmethod
    def start_repeating(
        self,
        callback: Callable[[], None],
        interval_ms: int = TICK_INTERVAL_MS
    ) -> int:
        """
        Call callback every interval_ms until cancelled.

        Returns:
            Handle to pass to cancel().
        """

    @abstractmethod
    def cancel(self, handle: int):
        """Stop a repeating timer. Unknown handles are ignored."""


class QtScheduler(Scheduler):
    """
    Scheduler backed by QTimer.
    Callbacks run on the Qt event loop thread.
    """

    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent
        self._timers: Dict[int, QTimer] = {}
        self._handles = count(1)

    def start_repeating(
        self,
        callback: Callable[[], None],
        interval_ms: int = TICK_INTERVAL_MS
    ) -> int:
        handle = next(self._handles)
        timer = QTimer(self._parent)
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        self._timers[handle] = timer
        timer.start()
        logger.debug("Started timer %d (%d ms)", handle, interval_ms)
        return handle

    def cancel(self, handle: int):
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()
        logger.debug("Cancelled timer %d", handle)

    def active_count(self) -> int:
        """Number of timers currently running."""
        return sum(1 for timer in self._timers.values() if timer.isActive())
