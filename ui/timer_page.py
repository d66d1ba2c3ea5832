"""
Timer page widget for the Pomodoro Timer application.
Contains the countdown display, session dots, and controls.
"""

from typing import List, Optional
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QProgressBar
)
from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtGui import QFont

from core.models import Configuration, Mode, SessionState
from core.timer_engine import SessionController

# Accent color per mode
MODE_COLORS = {
    Mode.FOCUS: "#5B9FFE",
    Mode.SHORT_BREAK: "#7FD85C",
    Mode.LONG_BREAK: "#9D8DF1",
}

DOT_FILLED = "#ffffff"
DOT_EMPTY = "#4a4a4a"


def toggle_button_text(state: SessionState) -> str:
    """Label for the main button: START, PAUSE or RESUME."""
    if state.is_running:
        return "PAUSE"
    return "RESUME" if state.has_started else "START"


class TimerPage(QWidget):
    """
    Main timer page with countdown display and controls.
    Renders the controller's SessionState; never mutates it directly.
    """

    # Emitted when the user asks for the settings dialog
    settings_requested = Signal()
    # Emitted when the user asks to stop (confirmation happens in the window)
    stop_requested = Signal()

    def __init__(
        self,
        controller: SessionController,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self.controller = controller
        self._dots: List[QLabel] = []

        self._setup_ui()
        self._connect_signals()
        self._render(controller.state)

    def _setup_ui(self):
        """Set up the UI components."""
        layout = QVBoxLayout(self)
        layout.setSpacing(20)
        layout.setContentsMargins(30, 30, 30, 30)

        # Mode label (FOCUS / BREAK / REST)
        self.mode_label = QLabel(Mode.FOCUS.label)
        self.mode_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        mode_font = QFont()
        mode_font.setPointSize(14)
        mode_font.setBold(True)
        self.mode_label.setFont(mode_font)
        layout.addWidget(self.mode_label)

        # Big countdown display
        self.time_label = QLabel("00:00")
        self.time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        time_font = QFont("monospace")
        time_font.setPointSize(54)
        self.time_label.setFont(time_font)
        self.time_label.setMinimumHeight(100)
        layout.addWidget(self.time_label)

        # Remaining fraction of the current period
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setFixedHeight(8)
        layout.addWidget(self.progress_bar)

        # Session dots
        self.dots_layout = QHBoxLayout()
        self.dots_layout.setSpacing(6)
        self.dots_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addLayout(self.dots_layout)

        # Control buttons
        button_layout = QHBoxLayout()
        button_layout.setSpacing(15)

        self.reset_btn = QPushButton("Reset")
        self.reset_btn.setMinimumSize(90, 45)
        self.reset_btn.setToolTip("Reset the current period (R)")
        button_layout.addWidget(self.reset_btn)

        self.toggle_btn = QPushButton("START")
        self.toggle_btn.setMinimumSize(140, 45)
        self.toggle_btn.setToolTip("Start, pause or resume (Space)")
        button_layout.addWidget(self.toggle_btn)

        self.settings_btn = QPushButton("Settings")
        self.settings_btn.setMinimumSize(90, 45)
        button_layout.addWidget(self.settings_btn)

        self.stop_btn = QPushButton("Stop")
        self.stop_btn.setMinimumSize(90, 45)
        self.stop_btn.setToolTip("End the session (S)")
        self.stop_btn.setStyleSheet("""
            QPushButton {
                background-color: #f44336;
                color: white;
            }
            QPushButton:hover {
                background-color: #da190b;
            }
        """)
        button_layout.addWidget(self.stop_btn)

        # Keep keyboard focus on the window so Space reaches the shortcuts
        for button in (self.reset_btn, self.toggle_btn, self.settings_btn, self.stop_btn):
            button.setFocusPolicy(Qt.FocusPolicy.NoFocus)

        layout.addLayout(button_layout)
        layout.addStretch()

    def _connect_signals(self):
        """Connect widget signals to slots."""
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.settings_changed.connect(self._on_settings_changed)

        self.toggle_btn.clicked.connect(self.controller.toggle)
        self.reset_btn.clicked.connect(self.controller.reset)
        self.settings_btn.clicked.connect(self.settings_requested)
        self.stop_btn.clicked.connect(self.stop_requested)

    def _rebuild_dots(self, count: int):
        """Recreate one dot per focus session in a cycle."""
        for dot in self._dots:
            self.dots_layout.removeWidget(dot)
            dot.deleteLater()
        self._dots = []
        for _ in range(count):
            dot = QLabel()
            dot.setFixedSize(8, 8)
            self.dots_layout.addWidget(dot)
            self._dots.append(dot)

    @Slot(SessionState)
    def _on_state_changed(self, state: SessionState):
        self._render(state)

    @Slot(Configuration)
    def _on_settings_changed(self, config: Configuration):
        self._render(self.controller.state)

    def _render(self, state: SessionState):
        """Update every widget from the session state."""
        config = self.controller.config
        color = MODE_COLORS[state.mode]

        self.mode_label.setText(state.mode.label)
        self.mode_label.setStyleSheet(f"color: {color}; letter-spacing: 2px;")
        self.time_label.setText(state.format_remaining())

        fraction = state.progress_fraction(self.controller.total_seconds)
        self.progress_bar.setValue(int(fraction * 1000))
        self.progress_bar.setStyleSheet(
            f"QProgressBar::chunk {{ background-color: {color}; border-radius: 4px; }}"
        )

        flags = state.session_dots(config.long_break_interval)
        if len(flags) != len(self._dots):
            self._rebuild_dots(len(flags))
        for dot, filled in zip(self._dots, flags):
            dot.setStyleSheet(
                f"background-color: {DOT_FILLED if filled else DOT_EMPTY}; border-radius: 4px;"
            )

        self.toggle_btn.setText(toggle_button_text(state))
        self.toggle_btn.setStyleSheet(
            f"QPushButton {{ background-color: {color}; color: white; letter-spacing: 1px; }}"
        )

        # Settings while idle, stop once a session has started
        self.settings_btn.setVisible(not state.has_started)
        self.stop_btn.setVisible(state.has_started)
