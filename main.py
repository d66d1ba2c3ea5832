#!/usr/bin/env python3
"""
Pomodoro Timer - a local-only focus/break interval timer.

Cycles through focus periods, short breaks and a long break after every
N focus sessions, with:
- Configurable durations and long-break interval, saved between runs
- Pause, resume, reset and stop with confirmation
- Desktop notifications and a completion chime
- Keyboard shortcuts (Space, R, S)

Usage:
    pip install .
    pomodoro-timer [--data-dir DIR] [--log-level LEVEL]

License: MIT
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from core.logger import setup_logging
from core.storage import DB_FILENAME, IN_MEMORY, Storage, get_app_data_dir

logger = logging.getLogger(__name__)

STYLESHEET = """
    QMainWindow, QWidget {
        background-color: #1b1d23;
        color: #e6e6e6;
    }
    QLabel {
        color: #e6e6e6;
        font-size: 13px;
    }
    QGroupBox {
        font-weight: bold;
        font-size: 13px;
        border: 1px solid #3a3d46;
        border-radius: 8px;
        margin-top: 12px;
        padding-top: 12px;
        background-color: #23262e;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 8px;
        color: #5B9FFE;
    }
    QSpinBox {
        padding: 6px;
        border: 1px solid #3a3d46;
        border-radius: 5px;
        background-color: #2a2d35;
        color: #ffffff;
    }
    QSpinBox:focus {
        border-color: #5B9FFE;
    }
    QCheckBox {
        spacing: 10px;
        font-size: 13px;
    }
    QPushButton {
        padding: 10px 18px;
        border-radius: 20px;
        background-color: #3a3d46;
        color: #ffffff;
        font-size: 14px;
        font-weight: bold;
        border: none;
    }
    QPushButton:hover {
        background-color: #4a4e59;
    }
    QPushButton:pressed {
        background-color: #2f323a;
    }
    QProgressBar {
        background-color: #2a2d35;
        border: none;
        border-radius: 4px;
    }
    QDialog, QMessageBox {
        background-color: #1b1d23;
    }
    QToolTip {
        background-color: #2a2d35;
        color: #ffffff;
        border: 1px solid #5B9FFE;
        padding: 5px;
    }
    QMenu {
        background-color: #2a2d35;
        border: 1px solid #3a3d46;
        padding: 5px;
    }
    QMenu::item:selected {
        background-color: #5B9FFE;
    }
"""


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pomodoro Timer")
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory for settings and logs (default: per-user app data folder)"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)"
    )
    # Qt consumes its own options (-platform, -style, ...)
    args, _ = parser.parse_known_args(argv)
    return args


def resolve_data_dir(data_dir: Optional[Path]) -> Optional[Path]:
    """
    Return a usable data directory, creating it if needed.
    Returns None when no directory can be created.
    """
    try:
        if data_dir is None:
            return get_app_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir
    except OSError as e:
        logger.warning("Could not create data directory: %s", e)
        return None


def setup_exception_handling():
    """Log exceptions that reach the Qt event loop."""
    def exception_hook(exctype, value, traceback):
        logger.critical("Unhandled exception", exc_info=(exctype, value, traceback))
        sys.__excepthook__(exctype, value, traceback)

    sys.excepthook = exception_hook


def setup_signal_handlers(app: QApplication):
    """Set up signal handlers for graceful shutdown."""
    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down", signum)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


def main() -> int:
    """Main entry point for the Pomodoro Timer application."""
    args = parse_args()

    setup_logging(level=args.log_level)
    data_dir = resolve_data_dir(args.data_dir)
    setup_logging(data_dir, args.log_level)
    setup_exception_handling()

    if data_dir is None:
        logger.warning("Settings will not be saved this run")
        storage = Storage(IN_MEMORY)
    else:
        storage = Storage(data_dir / DB_FILENAME)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Pomodoro Timer")
    app.setApplicationDisplayName("Pomodoro Timer")
    app.setOrganizationName("PomodoroTimer")
    app.setStyle("Fusion")
    app.setStyleSheet(STYLESHEET)

    setup_signal_handlers(app)

    from ui.main_window import MainWindow
    window = MainWindow(storage)
    window.show()

    logger.info("Pomodoro Timer started (data: %s)", data_dir or IN_MEMORY)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
