"""Tests for the timer view, the settings dialog and the main window."""

from dataclasses import asdict
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QKeyEvent

from core.models import Configuration, Mode, SessionState
from core.notifications import NotificationManager
from ui.main_window import MainWindow
from ui.settings_page import SettingsDialog
from ui.timer_page import TimerPage, toggle_button_text


def key_press(key):
    return QKeyEvent(QEvent.Type.KeyPress, key, Qt.KeyboardModifier.NoModifier)


# ---------------------------------------------------------------------------
# Timer view
# ---------------------------------------------------------------------------


class TestToggleButtonText:

    @pytest.mark.parametrize("is_running, has_started, text", [
        (False, False, "START"),
        (True, True, "PAUSE"),
        (False, True, "RESUME"),
    ])
    def test_text_per_phase(self, is_running, has_started, text):
        state = SessionState(
            mode=Mode.FOCUS,
            remaining_seconds=60,
            is_running=is_running,
            has_started=has_started,
        )
        assert toggle_button_text(state) == text


class TestTimerPage:

    def test_idle_shows_settings_not_stop(self, controller):
        page = TimerPage(controller)

        assert not page.settings_btn.isHidden()
        assert page.stop_btn.isHidden()
        assert page.toggle_btn.text() == "START"
        assert page.time_label.text() == "25:00"

    def test_started_session_shows_stop_not_settings(self, controller):
        page = TimerPage(controller)
        controller.toggle()

        assert page.settings_btn.isHidden()
        assert not page.stop_btn.isHidden()
        assert page.toggle_btn.text() == "PAUSE"

    def test_paused_session_keeps_stop(self, controller):
        page = TimerPage(controller)
        controller.toggle()
        controller.toggle()

        assert page.toggle_btn.text() == "RESUME"
        assert not page.stop_btn.isHidden()

    def test_stop_returns_to_idle_view(self, controller):
        page = TimerPage(controller)
        controller.toggle()
        controller.stop()

        assert not page.settings_btn.isHidden()
        assert page.stop_btn.isHidden()
        assert page.toggle_btn.text() == "START"

    def test_tick_updates_countdown(self, controller, scheduler):
        page = TimerPage(controller)
        controller.toggle()
        scheduler.fire(1)

        assert page.time_label.text() == "24:59"
        assert page.mode_label.text() == "FOCUS"

    def test_one_dot_per_interval(self, make_controller):
        page = TimerPage(make_controller(long_break_interval=6))
        assert len(page._dots) == 6


# ---------------------------------------------------------------------------
# Settings dialog
# ---------------------------------------------------------------------------


@pytest.fixture()
def notifications():
    manager = MagicMock(spec=NotificationManager)
    manager.request_permission.return_value = True
    return manager


class TestSettingsDialog:

    def test_changes_match_loaded_configuration(self, notifications):
        config = Configuration(
            focus_minutes=30,
            short_break_minutes=7,
            long_break_minutes=20,
            long_break_interval=3,
            notifications_enabled=True,
            sound_enabled=False,
        )
        dialog = SettingsDialog(config, notifications)

        assert dialog.changes() == asdict(config)

    def test_large_stored_values_are_not_clamped(self, notifications):
        config = Configuration(focus_minutes=200, long_break_minutes=120, long_break_interval=12)
        dialog = SettingsDialog(config, notifications)

        changes = dialog.changes()
        assert changes['focus_minutes'] == 200
        assert changes['long_break_minutes'] == 120
        assert changes['long_break_interval'] == 12
        assert config.merged(**changes) == config

    def test_loading_does_not_trigger_alerts(self, notifications):
        SettingsDialog(Configuration(notifications_enabled=True, sound_enabled=True), notifications)

        notifications.request_permission.assert_not_called()
        notifications.play_test_sound.assert_not_called()

    def test_enabling_notifications_requests_permission(self, notifications):
        dialog = SettingsDialog(Configuration(), notifications)

        dialog.notification_check.setChecked(True)

        notifications.request_permission.assert_called_once_with()
        assert dialog.notification_check.isChecked()
        assert dialog.changes()['notifications_enabled'] is True

    def test_denied_permission_unchecks_notifications(self, notifications):
        notifications.request_permission.return_value = False
        dialog = SettingsDialog(Configuration(), notifications)

        dialog.notification_check.setChecked(True)

        assert not dialog.notification_check.isChecked()
        assert dialog.changes()['notifications_enabled'] is False

    def test_disabling_notifications_does_not_ask(self, notifications):
        dialog = SettingsDialog(Configuration(notifications_enabled=True), notifications)

        dialog.notification_check.setChecked(False)

        notifications.request_permission.assert_not_called()

    def test_enabling_sound_plays_test_chime(self, notifications):
        dialog = SettingsDialog(Configuration(sound_enabled=False), notifications)

        dialog.sound_check.setChecked(True)

        notifications.play_test_sound.assert_called_once_with()

    def test_disabling_sound_is_silent(self, notifications):
        dialog = SettingsDialog(Configuration(sound_enabled=True), notifications)

        dialog.sound_check.setChecked(False)

        notifications.play_test_sound.assert_not_called()


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------


@pytest.fixture()
def window(storage):
    win = MainWindow(storage)
    yield win
    win.controller.shutdown()
    win.notifications.cleanup()
    storage.close()


class TestMainWindow:

    def test_space_toggles_timer(self, window):
        window.keyPressEvent(key_press(Qt.Key.Key_Space))
        assert window.controller.state.is_running
        assert window.windowTitle() == "25:00 FOCUS"

        window.keyPressEvent(key_press(Qt.Key.Key_Space))
        assert not window.controller.state.is_running
        assert window.windowTitle() == "25:00 FOCUS (paused)"

    def test_r_resets_current_period(self, window):
        window.controller.toggle()
        window.controller.on_tick()

        window.keyPressEvent(key_press(Qt.Key.Key_R))

        assert window.controller.state.remaining_seconds == 25 * 60
        assert not window.controller.state.is_running

    def test_settings_are_persisted(self, window, storage):
        window.controller.update_settings(focus_minutes=40)

        assert window.timer_page.time_label.text() == "40:00"
        assert '"focusTime": 40' in storage.read_config()
