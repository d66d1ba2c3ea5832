"""
Data models for the Pomodoro Timer application.
Uses dataclasses for clean, type-annotated data structures.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import Any, Dict, List

from .errors import ConfigLoadError, InvalidConfigurationError


class Mode(Enum):
    """Phase of the pomodoro cycle."""
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def label(self) -> str:
        """Short upper-case label shown above the countdown."""
        return _MODE_LABELS[self]


_MODE_LABELS = {
    Mode.FOCUS: "FOCUS",
    Mode.SHORT_BREAK: "BREAK",
    Mode.LONG_BREAK: "REST",
}


class TimerPhase(Enum):
    """Controller state derived from Session State flags."""
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()


# Python field name -> persisted JSON key
_DURATION_KEYS = {
    'focus_minutes': 'focusTime',
    'short_break_minutes': 'shortBreakTime',
    'long_break_minutes': 'longBreakTime',
    'long_break_interval': 'longBreakInterval',
}
_FLAG_KEYS = {
    'notifications_enabled': 'notificationsEnabled',
    'sound_enabled': 'soundEnabled',
}


def _as_positive_int(value: Any) -> int:
    """
    Coerce a value to a positive integer.

    Accepts ints and integral floats (JSON numbers). Booleans are rejected
    even though they are ints in Python.

    Raises:
        ValueError: if the value is not a positive whole number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    value = int(value)
    if value < 1:
        raise ValueError(f"expected a positive number, got {value}")
    return value


@dataclass(frozen=True)
class Configuration:
    """
    User-configurable timer settings.
    Persisted as JSON using the keys in _DURATION_KEYS and _FLAG_KEYS.
    """
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    long_break_interval: int = 4  # focus sessions before a long break
    notifications_enabled: bool = False
    sound_enabled: bool = True

    def __post_init__(self):
        """Validate configuration data."""
        for name in _DURATION_KEYS:
            try:
                _as_positive_int(getattr(self, name))
            except ValueError as e:
                raise InvalidConfigurationError(f"{name}: {e}") from e
        for name in _FLAG_KEYS:
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfigurationError(f"{name} must be a boolean")

    def merged(self, **changes: Any) -> 'Configuration':
        """
        Return a copy with the given fields replaced.

        Args:
            **changes: Any subset of the Configuration fields.

        Returns:
            A new, validated Configuration.

        Raises:
            InvalidConfigurationError: on unknown fields or invalid values.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise InvalidConfigurationError(
                f"unknown settings: {', '.join(unknown)}"
            )
        cleaned = {}
        for name, value in changes.items():
            if name in _DURATION_KEYS:
                try:
                    value = _as_positive_int(value)
                except ValueError as e:
                    raise InvalidConfigurationError(f"{name}: {e}") from e
            cleaned[name] = value
        return replace(self, **cleaned)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        data = {key: getattr(self, name) for name, key in _DURATION_KEYS.items()}
        data.update({key: getattr(self, name) for name, key in _FLAG_KEYS.items()})
        return data

    @classmethod
    def from_dict(cls, data: Any) -> 'Configuration':
        """
        Build a Configuration from persisted JSON data.

        Every duration key must be present and numeric. Flag keys are
        optional and fall back to the defaults.

        Raises:
            ConfigLoadError: if the data does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ConfigLoadError(f"expected an object, got {type(data).__name__}")

        values = {}
        for name, key in _DURATION_KEYS.items():
            if key not in data:
                raise ConfigLoadError(f"missing field {key!r}")
            try:
                values[name] = _as_positive_int(data[key])
            except ValueError as e:
                raise ConfigLoadError(f"invalid field {key!r}: {e}") from e

        for name, key in _FLAG_KEYS.items():
            if isinstance(data.get(key), bool):
                values[name] = data[key]

        return cls(**values)


def total_seconds_for(mode: Mode, config: Configuration) -> int:
    """Return the full length of a period of the given mode, in seconds."""
    if mode == Mode.FOCUS:
        minutes = config.focus_minutes
    elif mode == Mode.SHORT_BREAK:
        minutes = config.short_break_minutes
    else:
        minutes = config.long_break_minutes
    return minutes * 60


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the timer state machine.
    Emitted to observers after every change.
    """
    mode: Mode = Mode.FOCUS
    remaining_seconds: int = 0
    is_running: bool = False
    has_started: bool = False
    completed_focus_sessions: int = 0

    @classmethod
    def initial(cls, config: Configuration) -> 'SessionState':
        """State at construction and after an explicit stop."""
        return cls(
            mode=Mode.FOCUS,
            remaining_seconds=total_seconds_for(Mode.FOCUS, config),
        )

    @property
    def phase(self) -> TimerPhase:
        """Return IDLE, RUNNING or PAUSED."""
        if self.is_running:
            return TimerPhase.RUNNING
        if self.has_started:
            return TimerPhase.PAUSED
        return TimerPhase.IDLE

    def format_remaining(self) -> str:
        """Format remaining time as MM:SS."""
        minutes = self.remaining_seconds // 60
        seconds = self.remaining_seconds % 60
        return f"{minutes:02d}:{seconds:02d}"

    def progress_fraction(self, total_seconds: int) -> float:
        """Return remaining / total, clamped to [0, 1]."""
        if total_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.remaining_seconds / total_seconds))

    def session_dots(self, long_break_interval: int) -> List[bool]:
        """
        Return one flag per focus session in the current cycle.
        The first completed % interval entries are filled.
        """
        interval = max(1, long_break_interval)
        filled = self.completed_focus_sessions % interval
        return [i < filled for i in range(interval)]
