"""
Main window for the Pomodoro Timer application.
Wires the session controller to the timer page, dialogs, tray and shortcuts.
"""

import logging
from PySide6.QtWidgets import (
    QMainWindow, QSystemTrayIcon, QMenu, QApplication, QMessageBox,
    QLineEdit, QAbstractSpinBox
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QIcon, QAction, QCloseEvent, QKeyEvent, QPixmap, QPainter, QColor

from core.config_store import ConfigStore
from core.errors import InvalidConfigurationError
from core.models import Configuration, SessionState, TimerPhase
from core.notifications import NotificationManager
from core.scheduler import QtScheduler
from core.storage import Storage
from core.timer_engine import SessionController

from .settings_page import SettingsDialog
from .shortcuts import ShortcutAction, resolve_shortcut
from .timer_page import TimerPage

logger = logging.getLogger(__name__)


def create_app_icon() -> QIcon:
    """Create a simple app icon programmatically."""
    sizes = [16, 32, 48, 64]
    icon = QIcon()

    for size in sizes:
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Tomato body
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor("#E53935"))
        margin = size // 8
        painter.drawEllipse(margin, margin + size // 16, size - 2*margin, size - 2*margin)

        # Leaf
        painter.setBrush(QColor("#43A047"))
        leaf = max(2, size // 4)
        painter.drawEllipse((size - leaf) // 2, margin // 2, leaf, leaf // 2 + 1)

        painter.end()
        icon.addPixmap(pixmap)

    return icon


class MainWindow(QMainWindow):
    """
    Main application window.
    Owns the controller and its collaborators for the lifetime of the app.
    """

    def __init__(self, storage: Storage):
        super().__init__()

        self.storage = storage
        self.scheduler = QtScheduler(self)
        self.controller = SessionController(ConfigStore(storage), self.scheduler, self)
        self.notifications = NotificationManager(parent=self)
        self._dialog_open = False

        self.setWindowTitle("Pomodoro Timer")
        self.setMinimumSize(420, 360)
        self.resize(460, 400)

        self.app_icon = create_app_icon()
        self.setWindowIcon(self.app_icon)

        self._setup_ui()
        self._setup_tray()
        self._connect_signals()
        self._apply_configuration(self.controller.config)

    def _setup_ui(self):
        """Set up the main UI."""
        self.timer_page = TimerPage(self.controller)
        self.setCentralWidget(self.timer_page)

    def _setup_tray(self):
        """Create the tray icon and its menu when the platform has a tray."""
        self.tray_icon = None
        if not QSystemTrayIcon.isSystemTrayAvailable():
            return

        self.tray_icon = QSystemTrayIcon(self.app_icon, self)
        self.tray_icon.setToolTip("Pomodoro Timer")

        menu = QMenu(self)
        self._add_tray_action(menu, "Show", self._show_window)
        menu.addSeparator()
        self.tray_toggle_action = self._add_tray_action(menu, "Start", self.controller.toggle)
        self._add_tray_action(menu, "Reset", self.controller.reset)
        self.tray_stop_action = self._add_tray_action(menu, "Stop", self._confirm_stop)
        self.tray_stop_action.setEnabled(False)
        menu.addSeparator()
        self._add_tray_action(menu, "Quit", self._quit_app)

        self.tray_icon.setContextMenu(menu)
        self.tray_icon.activated.connect(self._on_tray_activated)
        self.tray_icon.show()
        self.notifications.set_tray_icon(self.tray_icon)

    def _add_tray_action(self, menu: QMenu, text: str, slot) -> QAction:
        action = QAction(text, self)
        action.triggered.connect(slot)
        menu.addAction(action)
        return action

    def _connect_signals(self):
        """Connect signals from various components."""
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.settings_changed.connect(self._apply_configuration)
        self.controller.period_completed.connect(self.notifications.on_period_completed)

        self.timer_page.settings_requested.connect(self._open_settings)
        self.timer_page.stop_requested.connect(self._confirm_stop)

    @Slot(Configuration)
    def _apply_configuration(self, config: Configuration):
        """Push notification and sound flags to the notification manager."""
        self.notifications.apply_configuration(config)
        if config.notifications_enabled:
            self.notifications.request_permission()

    @Slot(SessionState)
    def _on_state_changed(self, state: SessionState):
        """Update window title and tray for the new state."""
        if state.has_started:
            suffix = " (paused)" if state.phase == TimerPhase.PAUSED else ""
            title = f"{state.format_remaining()} {state.mode.label}{suffix}"
        else:
            title = "Pomodoro Timer"
        self.setWindowTitle(title)

        if self.tray_icon is not None:
            self.tray_icon.setToolTip(title)
            if state.is_running:
                self.tray_toggle_action.setText("Pause")
            else:
                self.tray_toggle_action.setText("Resume" if state.has_started else "Start")
            self.tray_stop_action.setEnabled(state.has_started)

    # ==================== Dialogs ====================

    @Slot()
    def _open_settings(self):
        """Show the settings dialog and apply the result."""
        dialog = SettingsDialog(self.controller.config, self.notifications, self)
        self._dialog_open = True
        try:
            accepted = dialog.exec() == SettingsDialog.DialogCode.Accepted
        finally:
            self._dialog_open = False

        if not accepted:
            return
        try:
            self.controller.update_settings(**dialog.changes())
        except InvalidConfigurationError as e:
            logger.warning("Rejected settings: %s", e)
            QMessageBox.warning(self, "Invalid Settings", str(e))

    @Slot()
    def _confirm_stop(self):
        """Ask before ending the session."""
        if not self.controller.state.has_started:
            return

        self._dialog_open = True
        try:
            reply = QMessageBox.question(
                self,
                "End Session?",
                "This will stop the timer and reset your completed sessions.",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No
            )
        finally:
            self._dialog_open = False

        if reply == QMessageBox.StandardButton.Yes:
            self.controller.stop()

    # ==================== Keyboard ====================

    def keyPressEvent(self, event: QKeyEvent):
        """Handle Space / R / S shortcuts."""
        focus = QApplication.focusWidget()
        action = resolve_shortcut(
            event.key(),
            has_started=self.controller.state.has_started,
            dialog_open=self._dialog_open,
            editing_text=isinstance(focus, (QLineEdit, QAbstractSpinBox)),
        )

        if action == ShortcutAction.TOGGLE:
            self.controller.toggle()
        elif action == ShortcutAction.RESET:
            self.controller.reset()
        elif action == ShortcutAction.STOP:
            self._confirm_stop()
        else:
            # Modal dialogs close themselves on Escape
            super().keyPressEvent(event)
            return
        event.accept()

    # ==================== Tray / lifecycle ====================

    @Slot(QSystemTrayIcon.ActivationReason)
    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason):
        """Handle tray icon activation."""
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self._show_window()

    @Slot()
    def _show_window(self):
        """Show and bring window to front."""
        self.show()
        self.raise_()
        self.activateWindow()

    @Slot()
    def _quit_app(self):
        """Quit the application."""
        self._cleanup()
        QApplication.quit()

    def closeEvent(self, event: QCloseEvent):
        """Hide to the tray while a session runs, otherwise quit."""
        if self.controller.state.is_running and not self._confirm_close():
            event.ignore()
            return

        self._cleanup()
        event.accept()

    def _confirm_close(self) -> bool:
        """Return True if the window may close while the timer is running."""
        if self.tray_icon is not None and self.tray_icon.isVisible():
            self.hide()
            self.tray_icon.showMessage(
                "Pomodoro Timer",
                "Still counting down. Double-click the tray icon to reopen.",
                QSystemTrayIcon.MessageIcon.Information,
                2000
            )
            return False

        reply = QMessageBox.question(
            self,
            "Quit Pomodoro Timer?",
            "The timer is running. Quit anyway?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        return reply == QMessageBox.StandardButton.Yes

    def _cleanup(self):
        """Stop the timer and release the chime file before exit."""
        self.controller.shutdown()
        self.notifications.cleanup()
        self.storage.close()
        if self.tray_icon is not None:
            self.tray_icon.hide()
