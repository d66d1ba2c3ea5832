"""
Settings dialog for the Pomodoro Timer application.
Edits durations, the long-break interval, and notification options.
"""

from typing import Any, Dict, Optional
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QSpinBox, QCheckBox,
    QGroupBox, QDialogButtonBox, QWidget
)
from PySide6.QtCore import Slot

from core.models import Configuration
from core.notifications import NotificationManager

MAX_INTERVAL = 10


def _set_spin(spin: QSpinBox, value: int):
    """Show a stored value, raising the spin box maximum if it is larger."""
    if value > spin.maximum():
        spin.setMaximum(value)
    spin.setValue(value)


class SettingsDialog(QDialog):
    """
    Settings dialog for configuring durations and alerts.
    Changes are only applied when the dialog is accepted.
    """

    def __init__(
        self,
        config: Configuration,
        notifications: NotificationManager,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._config = config
        self.notifications = notifications

        self.setWindowTitle("Edit Duration")
        self.setModal(True)

        self._setup_ui()
        self._load_settings()
        self._connect_signals()

    def _setup_ui(self):
        """Set up the UI components."""
        layout = QVBoxLayout(self)
        layout.setSpacing(16)

        # Durations section
        duration_box = QGroupBox("Durations")
        form = QFormLayout(duration_box)

        self.focus_spin = self._minutes_spin(1, 180)
        form.addRow("Focus:", self.focus_spin)

        self.short_break_spin = self._minutes_spin(1, 60)
        form.addRow("Short break:", self.short_break_spin)

        self.long_break_spin = self._minutes_spin(1, 90)
        form.addRow("Long break:", self.long_break_spin)

        self.interval_spin = QSpinBox()
        self.interval_spin.setRange(1, MAX_INTERVAL)
        self.interval_spin.setSuffix(" intervals")
        form.addRow("Long break every:", self.interval_spin)

        layout.addWidget(duration_box)

        # Alerts section
        alerts_box = QGroupBox("Alerts")
        alerts_layout = QVBoxLayout(alerts_box)

        self.notification_check = QCheckBox("Show desktop notifications")
        alerts_layout.addWidget(self.notification_check)

        self.sound_check = QCheckBox("Play sound when a period ends")
        alerts_layout.addWidget(self.sound_check)

        layout.addWidget(alerts_box)

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        layout.addWidget(self.buttons)

    @staticmethod
    def _minutes_spin(minimum: int, maximum: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(minimum, maximum)
        spin.setSuffix(" min")
        return spin

    def _connect_signals(self):
        """Connect widget signals."""
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        self.notification_check.toggled.connect(self._on_notifications_toggled)
        self.sound_check.toggled.connect(self._on_sound_toggled)

    def _load_settings(self):
        """Populate the widgets from the configuration."""
        _set_spin(self.focus_spin, self._config.focus_minutes)
        _set_spin(self.short_break_spin, self._config.short_break_minutes)
        _set_spin(self.long_break_spin, self._config.long_break_minutes)
        _set_spin(self.interval_spin, self._config.long_break_interval)
        self.notification_check.setChecked(self._config.notifications_enabled)
        self.sound_check.setChecked(self._config.sound_enabled)

    @Slot(bool)
    def _on_notifications_toggled(self, checked: bool):
        """Ask for notification permission when enabling; revert on denial."""
        if checked and not self.notifications.request_permission():
            self.notification_check.blockSignals(True)
            self.notification_check.setChecked(False)
            self.notification_check.blockSignals(False)
            self.notification_check.setToolTip(
                "Desktop notifications are not available on this system"
            )

    @Slot(bool)
    def _on_sound_toggled(self, checked: bool):
        """Play a test chime when sound is switched on."""
        if checked:
            self.notifications.play_test_sound()

    def changes(self) -> Dict[str, Any]:
        """Return the edited values as Configuration fields."""
        return {
            'focus_minutes': self.focus_spin.value(),
            'short_break_minutes': self.short_break_spin.value(),
            'long_break_minutes': self.long_break_spin.value(),
            'long_break_interval': self.interval_spin.value(),
            'notifications_enabled': self.notification_check.isChecked(),
            'sound_enabled': self.sound_check.isChecked(),
        }
