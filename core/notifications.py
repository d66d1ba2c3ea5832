"""
Notification module for the Pomodoro Timer application.
Handles the completion chime and desktop notifications when a period ends.
"""

import io
import json
import logging
import math
import os
import shutil
import struct
import subprocess
import sys
import tempfile
import wave
from enum import Enum
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Slot
from PySide6.QtWidgets import QSystemTrayIcon

from .models import Configuration, Mode

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# C5, E5, G5 (C major chord), each starting 150ms after the previous one
CHIME_TONES: List[Tuple[float, float]] = [
    (0.0, 523.25),
    (0.15, 659.25),
    (0.3, 783.99),
]
TONE_SECONDS = 0.4
ATTACK_SECONDS = 0.05
PEAK_GAIN = 0.3
FLOOR_GAIN = 0.01

NOTIFICATION_MESSAGES: Dict[Mode, Tuple[str, str]] = {
    Mode.FOCUS: (
        "🎯 Focus Session Complete!",
        "Great work! Time for a break to recharge.",
    ),
    Mode.SHORT_BREAK: (
        "☕ Short Break Over!",
        "Ready to get back to work? Let's stay focused!",
    ),
    Mode.LONG_BREAK: (
        "🌟 Long Break Complete!",
        "You've earned it! Ready for another productive session?",
    ),
}


def _envelope(t: float) -> float:
    """Linear attack to PEAK_GAIN, then exponential decay to FLOOR_GAIN."""
    if t < ATTACK_SECONDS:
        return PEAK_GAIN * (t / ATTACK_SECONDS)
    decay = (t - ATTACK_SECONDS) / (TONE_SECONDS - ATTACK_SECONDS)
    return PEAK_GAIN * (FLOOR_GAIN / PEAK_GAIN) ** decay


def generate_chime_samples(sample_rate: int = SAMPLE_RATE) -> List[int]:
    """
    Render the three-tone completion chime as 16-bit samples.

    Overlapping tones are summed and clipped to the 16-bit range.
    """
    tone_length = int(sample_rate * TONE_SECONDS)
    offsets = [int(sample_rate * start) for start, _ in CHIME_TONES]
    mix = [0.0] * (max(offsets) + tone_length)

    for offset, (_, frequency) in zip(offsets, CHIME_TONES):
        for i in range(tone_length):
            t = i / sample_rate
            mix[offset + i] += _envelope(t) * math.sin(2 * math.pi * frequency * t)

    return [max(-32768, min(32767, int(value * 32767))) for value in mix]


def generate_chime_wav(sample_rate: int = SAMPLE_RATE) -> bytes:
    """Render the completion chime as WAV file data."""
    samples = generate_chime_samples(sample_rate)

    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(1)  # Mono
        wav.setsampwidth(2)  # 16-bit
        wav.setframerate(sample_rate)
        wav.writeframes(struct.pack(f'<{len(samples)}h', *samples))

    return buffer.getvalue()


# Command-line audio players to try, in order, per platform
AUDIO_PLAYERS: Dict[str, List[str]] = {
    'darwin': ['afplay'],
    'linux': ['paplay', 'aplay'],
}

APP_NAME = "Pomodoro Timer"


def _platform() -> str:
    """Return 'linux', 'darwin', 'win32' or the raw sys.platform."""
    if sys.platform.startswith('linux'):
        return 'linux'
    return sys.platform


def audio_command(path: str) -> Optional[List[str]]:
    """Build the command that plays a WAV file, or None if no player is installed."""
    for player in AUDIO_PLAYERS.get(_platform(), []):
        if shutil.which(player):
            return [player, path]
    return None


def notification_command(title: str, message: str) -> Optional[List[str]]:
    """
    Build the native command that shows a desktop notification.

    Returns:
        The argv list, or None when the platform has no supported command.
    """
    platform = _platform()
    if platform == 'darwin' and shutil.which('osascript'):
        # json.dumps gives a double-quoted, backslash-escaped AppleScript string
        script = f'display notification {json.dumps(message)} with title {json.dumps(title)}'
        return ['osascript', '-e', script]
    if platform == 'linux' and shutil.which('notify-send'):
        return ['notify-send', '-a', APP_NAME, title, message]
    return None


class SoundPlayer:
    """
    Plays the completion chime.

    The chime is rendered to a temporary WAV file on first use and kept
    for the lifetime of the player.
    """

    def __init__(self):
        self.enabled = True
        self._temp_file: Optional[str] = None

    def play(self, force: bool = False):
        """
        Play the completion chime. Failures are ignored.

        Args:
            force: Play even when the player is disabled.
        """
        if not (self.enabled or force):
            return

        try:
            self._play_sound(self._ensure_sound_file())
        except Exception as e:
            logger.debug("Could not play sound: %s", e)

    def _ensure_sound_file(self) -> str:
        """Render the chime to a temporary file on first use."""
        if self._temp_file is None:
            fd, path = tempfile.mkstemp(suffix='.wav')
            with os.fdopen(fd, 'wb') as f:
                f.write(generate_chime_wav())
            self._temp_file = path
        return self._temp_file

    def _play_sound(self, path: str):
        if _platform() == 'win32':
            import winsound
            winsound.PlaySound(path, winsound.SND_FILENAME | winsound.SND_ASYNC)
            return

        command = audio_command(path)
        if command is None:
            logger.debug("No audio player found for %s", sys.platform)
            return
        subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

    def cleanup(self):
        """Delete the rendered chime."""
        path, self._temp_file = self._temp_file, None
        if path is None:
            return
        try:
            os.remove(path)
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)


class Permission(Enum):
    """Desktop notification permission."""
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class NotificationManager(QObject):
    """
    Alerts the user when a period ends.

    Notifications go through the system tray icon when one is set and the
    tray is available, otherwise through notify-send / osascript. They are
    only shown after request_permission() has succeeded.
    """

    def __init__(
        self,
        sound_player: Optional[SoundPlayer] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)

        self.sound_player = sound_player if sound_player is not None else SoundPlayer()
        self.notifications_enabled = False
        self._tray_icon: Optional[QSystemTrayIcon] = None
        self._permission = Permission.DEFAULT

    def set_tray_icon(self, tray_icon: QSystemTrayIcon):
        self._tray_icon = tray_icon

    @property
    def permission(self) -> Permission:
        return self._permission

    @property
    def sound_enabled(self) -> bool:
        return self.sound_player.enabled

    @sound_enabled.setter
    def sound_enabled(self, value: bool):
        self.sound_player.enabled = value

    def apply_configuration(self, config: Configuration):
        """Take the notification and sound flags from the configuration."""
        self.notifications_enabled = config.notifications_enabled
        self.sound_enabled = config.sound_enabled

    def request_permission(self) -> bool:
        """
        Check whether desktop notifications can be shown.

        A denial is remembered and disables notifications without error.

        Returns:
            True if notifications are permitted.
        """
        if self._permission == Permission.DEFAULT:
            if self._tray_available() or notification_command("", "") is not None:
                self._permission = Permission.GRANTED
            else:
                self._permission = Permission.DENIED
                logger.info("Desktop notifications are not available")
        return self._permission == Permission.GRANTED

    def _tray_available(self) -> bool:
        return self._tray_icon is not None and QSystemTrayIcon.isSystemTrayAvailable()

    @Slot(Mode)
    def on_period_completed(self, mode: Mode):
        """Play the chime and show the notification for the mode that ended."""
        if self.sound_enabled:
            self.sound_player.play()
        title, message = NOTIFICATION_MESSAGES[mode]
        self.show_notification(title, message)

    def play_test_sound(self):
        """Play the chime once regardless of the sound setting."""
        self.sound_player.play(force=True)

    def show_notification(self, title: str, message: str):
        """Show a desktop notification if enabled and permitted."""
        if not self.notifications_enabled:
            return
        if self._permission != Permission.GRANTED:
            logger.debug("Notification permission not granted, skipping %r", title)
            return

        if self._tray_available():
            self._tray_icon.showMessage(
                title, message, QSystemTrayIcon.MessageIcon.Information, 3000
            )
            return

        command = notification_command(title, message)
        if command is None:
            return
        try:
            subprocess.run(command, capture_output=True, timeout=5)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Could not show notification: %s", e)

    def cleanup(self):
        self.sound_player.cleanup()
