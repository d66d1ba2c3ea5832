"""
Exception types for the Pomodoro Timer application.
"""


class PomodoroError(Exception):
    """Base class for all application errors."""


class ConfigLoadError(PomodoroError):
    """Persisted configuration is missing, unreadable, or malformed."""


class ConfigSaveError(PomodoroError):
    """Persisting the configuration failed."""


class InvalidConfigurationError(PomodoroError, ValueError):
    """A settings update contained unknown fields or invalid values."""
