"""Tests for the completion chime and NotificationManager."""

import io
import os
import wave
from unittest.mock import MagicMock, patch

import pytest

from core.models import Configuration, Mode
from core.notifications import (
    APP_NAME,
    NOTIFICATION_MESSAGES,
    NotificationManager,
    Permission,
    SoundPlayer,
    audio_command,
    generate_chime_samples,
    generate_chime_wav,
    notification_command,
)


# ---------------------------------------------------------------------------
# Chime generation
# ---------------------------------------------------------------------------


class TestChime:

    def test_length_covers_all_three_tones(self):
        samples = generate_chime_samples(sample_rate=8000)
        # last tone starts at 0.3s and lasts 0.4s
        assert len(samples) == 2400 + 3200

    def test_samples_fit_16_bit(self):
        samples = generate_chime_samples(sample_rate=8000)
        assert max(samples) <= 32767
        assert min(samples) >= -32768
        assert max(abs(s) for s in samples) > 0

    def test_wav_header(self):
        with wave.open(io.BytesIO(generate_chime_wav(sample_rate=8000)), 'rb') as wav:
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.getframerate() == 8000
            assert wav.getnframes() == 5600


class TestSoundPlayer:

    def test_sound_file_created_lazily(self):
        player = SoundPlayer()
        assert player._temp_file is None

        with patch.object(SoundPlayer, "_play_sound") as play:
            player.play()
            player.play()

        path = player._temp_file
        assert path is not None and os.path.exists(path)
        assert play.call_count == 2
        play.assert_called_with(path)

        player.cleanup()
        assert not os.path.exists(path)

    def test_disabled_player_is_silent(self):
        player = SoundPlayer()
        player.enabled = False

        with patch.object(SoundPlayer, "_play_sound") as play:
            player.play()
            player.play(force=True)

        assert play.call_count == 1
        player.cleanup()

    def test_playback_failure_is_ignored(self):
        player = SoundPlayer()

        with patch.object(SoundPlayer, "_play_sound", side_effect=OSError("no device")):
            player.play()

        player.cleanup()


# ---------------------------------------------------------------------------
# NotificationManager
# ---------------------------------------------------------------------------


@pytest.fixture()
def sound_player():
    player = MagicMock(spec=SoundPlayer)
    player.enabled = True
    return player


@pytest.fixture()
def manager(sound_player):
    return NotificationManager(sound_player=sound_player)


class TestNotificationManager:

    def test_messages_for_every_mode(self):
        assert set(NOTIFICATION_MESSAGES) == set(Mode)
        assert "Focus Session Complete" in NOTIFICATION_MESSAGES[Mode.FOCUS][0]

    def test_apply_configuration(self, manager, sound_player):
        manager.apply_configuration(Configuration(notifications_enabled=True, sound_enabled=False))

        assert manager.notifications_enabled is True
        assert manager.sound_enabled is False
        assert sound_player.enabled is False

    def test_period_completed_plays_sound(self, manager, sound_player):
        manager.on_period_completed(Mode.FOCUS)
        sound_player.play.assert_called_once_with()

    def test_sound_disabled(self, manager, sound_player):
        manager.sound_enabled = False
        manager.on_period_completed(Mode.FOCUS)
        sound_player.play.assert_not_called()

    def test_test_sound_ignores_setting(self, manager, sound_player):
        manager.sound_enabled = False
        manager.play_test_sound()
        sound_player.play.assert_called_once_with(force=True)

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/notify-send")
    def test_permission_granted_with_notify_send(self, which, manager):
        assert manager.request_permission() is True
        assert manager.permission == Permission.GRANTED

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value=None)
    def test_permission_denied_is_remembered(self, which, manager):
        assert manager.request_permission() is False
        which.return_value = "/usr/bin/notify-send"
        assert manager.request_permission() is False
        assert manager.permission == Permission.DENIED

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/notify-send")
    @patch("core.notifications.subprocess.run")
    def test_native_notification_shown(self, run, which, manager):
        manager.notifications_enabled = True
        manager.request_permission()

        manager.on_period_completed(Mode.LONG_BREAK)

        title, body = NOTIFICATION_MESSAGES[Mode.LONG_BREAK]
        run.assert_called_once()
        assert run.call_args[0][0] == ["notify-send", "-a", APP_NAME, title, body]

    @patch("core.notifications.subprocess.run")
    def test_no_notification_without_permission(self, run, manager):
        manager.notifications_enabled = True
        manager.on_period_completed(Mode.FOCUS)
        run.assert_not_called()

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/notify-send")
    @patch("core.notifications.subprocess.run")
    def test_no_notification_when_disabled(self, run, which, manager):
        manager.request_permission()
        manager.on_period_completed(Mode.FOCUS)
        run.assert_not_called()

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/notify-send")
    @patch("core.notifications.subprocess.run", side_effect=OSError("gone"))
    def test_notification_failure_is_ignored(self, run, which, manager, sound_player):
        manager.notifications_enabled = True
        manager.request_permission()

        manager.on_period_completed(Mode.SHORT_BREAK)

        sound_player.play.assert_called_once()

    def test_driven_by_controller(self, make_controller, scheduler, manager, sound_player):
        controller = make_controller(focus_minutes=1)
        controller.period_completed.connect(manager.on_period_completed)
        controller.toggle()

        scheduler.fire(60)

        sound_player.play.assert_called_once_with()


class TestPlatformCommands:

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", side_effect=lambda name: "/usr/bin/aplay" if name == "aplay" else None)
    def test_audio_falls_back_to_second_player(self, which):
        assert audio_command("/tmp/chime.wav") == ["aplay", "/tmp/chime.wav"]

    @patch("core.notifications.sys.platform", "darwin")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/afplay")
    def test_audio_on_macos(self, which):
        assert audio_command("/tmp/chime.wav") == ["afplay", "/tmp/chime.wav"]

    @patch("core.notifications.sys.platform", "linux")
    @patch("core.notifications.shutil.which", return_value=None)
    def test_no_audio_player(self, which):
        assert audio_command("/tmp/chime.wav") is None

    @patch("core.notifications.sys.platform", "darwin")
    @patch("core.notifications.shutil.which", return_value="/usr/bin/osascript")
    def test_osascript_quotes_message(self, which):
        command = notification_command('Say "hi"', "Done")
        assert command[:2] == ["osascript", "-e"]
        assert command[2] == 'display notification "Done" with title "Say \\"hi\\""'

    @patch("core.notifications.sys.platform", "win32")
    def test_unsupported_platform(self):
        assert notification_command("title", "body") is None
