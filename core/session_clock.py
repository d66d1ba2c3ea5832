"""
One-second countdown step for the Pomodoro Timer.
The clock owns no timers; the controller calls tick() once per scheduled second.
"""

from dataclasses import replace

from .models import SessionState


def tick(state: SessionState) -> SessionState:
    """
    Advance the countdown by one second.

    Only a running state with time left is changed. Reaching zero is
    left to the caller, which decides the next mode.

    Args:
        state: Current session state.

    Returns:
        The new session state (the same object when nothing changed).
    """
    if not state.is_running or state.remaining_seconds <= 0:
        return state
    return replace(state, remaining_seconds=state.remaining_seconds - 1)
