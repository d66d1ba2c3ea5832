"""
Mode transitions for the pomodoro cycle.

Cycle: FOCUS -> SHORT_BREAK -> FOCUS -> ... -> LONG_BREAK (every Nth focus)
"""

from dataclasses import replace
from typing import Tuple

from .models import Configuration, Mode, SessionState, total_seconds_for


def next_mode(
    current_mode: Mode,
    completed_focus_sessions: int,
    long_break_interval: int
) -> Tuple[Mode, int]:
    """
    Decide the mode that follows an expired period.

    Args:
        current_mode: Mode whose countdown just reached zero.
        completed_focus_sessions: Focus sessions completed before this one.
        long_break_interval: Focus sessions between long breaks.

    Returns:
        Tuple of (new_mode, new_completed_focus_sessions).

    Raises:
        ValueError: if long_break_interval is less than 1.
    """
    if long_break_interval < 1:
        raise ValueError(f"long_break_interval must be >= 1, got {long_break_interval}")

    if current_mode != Mode.FOCUS:
        return Mode.FOCUS, completed_focus_sessions

    completed = completed_focus_sessions + 1
    if completed % long_break_interval == 0:
        return Mode.LONG_BREAK, completed
    return Mode.SHORT_BREAK, completed


def advance(state: SessionState, config: Configuration) -> SessionState:
    """
    Move an expired state into its next period.

    The interval and durations are read from the configuration in force
    now, and the new period starts running immediately.
    """
    mode, completed = next_mode(
        state.mode,
        state.completed_focus_sessions,
        config.long_break_interval
    )
    return replace(
        state,
        mode=mode,
        completed_focus_sessions=completed,
        remaining_seconds=total_seconds_for(mode, config),
        is_running=True,
        has_started=True,
    )
