"""
Timer engine for the Pomodoro Timer application.
Implements the session state machine driving focus and break periods.
"""

import logging
from dataclasses import replace
from typing import Any, Optional

from PySide6.QtCore import QObject, Signal

from . import session_clock, transitions
from .config_store import ConfigStore
from .models import Configuration, Mode, SessionState, TimerPhase, total_seconds_for
from .scheduler import Scheduler, TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


class SessionController(QObject):
    """
    Core timer engine implementing a state machine.

    States:
        IDLE: No session started
        RUNNING: Countdown ticking
        PAUSED: Session started, countdown frozen

    Every operation commits the new SessionState before emitting signals,
    so a failing observer cannot leave the controller half-updated.

    Signals:
        state_changed: Emitted after every change with the new SessionState
        period_completed: Emitted when a countdown reaches zero (provides the Mode that ended)
        settings_changed: Emitted after a settings update with the new Configuration
    """

    # Signals
    state_changed = Signal(SessionState)
    period_completed = Signal(Mode)
    settings_changed = Signal(Configuration)

    def __init__(
        self,
        config_store: ConfigStore,
        scheduler: Scheduler,
        parent: Optional[QObject] = None
    ):
        """
        Initialize the timer engine.

        Args:
            config_store: Store used to load and persist the Configuration.
            scheduler: Repeating-timer collaborator driving on_tick().
            parent: Optional Qt parent object.
        """
        super().__init__(parent)

        self.config_store = config_store
        self.scheduler = scheduler

        self._config = config_store.load()
        self._state = SessionState.initial(self._config)

        # Handle of the one outstanding repeating timer, if any
        self._timer_handle: Optional[int] = None

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state

    @property
    def config(self) -> Configuration:
        """Get current configuration."""
        return self._config

    @property
    def phase(self) -> TimerPhase:
        return self._state.phase

    @property
    def total_seconds(self) -> int:
        """Full length of the current mode under the current configuration."""
        return total_seconds_for(self._state.mode, self._config)

    @property
    def is_ticking(self) -> bool:
        """Check if a repeating timer is scheduled."""
        return self._timer_handle is not None

    # ==================== Operations ====================

    def toggle(self):
        """Start from idle, pause while running, resume while paused."""
        if self._state.is_running:
            self._stop_ticking()
            self._commit(replace(self._state, is_running=False))
            logger.info("Paused %s at %s", self._state.mode.value, self._state.format_remaining())
        else:
            self._start_ticking()
            self._commit(replace(self._state, is_running=True, has_started=True))
            logger.info("Running %s from %s", self._state.mode.value, self._state.format_remaining())

    def reset(self):
        """Restore the full duration of the current mode and stop the countdown."""
        self._stop_ticking()
        self._commit(replace(
            self._state,
            remaining_seconds=self.total_seconds,
            is_running=False,
        ))
        logger.info("Reset %s", self._state.mode.value)

    def stop(self):
        """End the session and return to an idle focus period."""
        self._stop_ticking()
        self._commit(SessionState.initial(self._config))
        logger.info("Session stopped")

    def update_settings(self, **changes: Any):
        """
        Merge changes into the configuration and persist it.

        The countdown is recomputed only while idle; a started session
        keeps its current countdown until the next transition or reset.

        Args:
            **changes: Any subset of the Configuration fields.

        Raises:
            InvalidConfigurationError: on unknown fields or invalid values.
        """
        self._config = self._config.merged(**changes)
        self.config_store.save(self._config)

        if self._state.phase == TimerPhase.IDLE:
            self._state = replace(self._state, remaining_seconds=self.total_seconds)

        self.settings_changed.emit(self._config)
        self.state_changed.emit(self._state)

    def on_tick(self):
        """
        Handle one elapsed second.
        Switches to the next mode when the countdown reaches zero.
        """
        if not self._state.is_running:
            return

        state = session_clock.tick(self._state)
        if state.remaining_seconds > 0:
            self._commit(state)
            return

        ended = state.mode
        self._state = transitions.advance(state, self._config)
        self._start_ticking()
        logger.info(
            "%s complete, starting %s (%d focus sessions done)",
            ended.value, self._state.mode.value, self._state.completed_focus_sessions
        )

        self.period_completed.emit(ended)
        self.state_changed.emit(self._state)

    def shutdown(self):
        """Cancel the timer. Call before application exit."""
        self._stop_ticking()

    # ==================== Internals ====================

    def _commit(self, state: SessionState):
        self._state = state
        self.state_changed.emit(state)

    def _start_ticking(self):
        """Cancel any outstanding timer, then schedule a new one."""
        self._stop_ticking()
        self._timer_handle = self.scheduler.start_repeating(self.on_tick, TICK_INTERVAL_MS)

    def _stop_ticking(self):
        if self._timer_handle is not None:
            handle, self._timer_handle = self._timer_handle, None
            self.scheduler.cancel(handle)
