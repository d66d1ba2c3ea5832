# Core module for Pomodoro Timer application
from .models import Configuration, Mode, SessionState, TimerPhase, total_seconds_for
from .timer_engine import SessionController

__all__ = [
    'Configuration', 'Mode', 'SessionState', 'TimerPhase',
    'total_seconds_for', 'SessionController',
]
