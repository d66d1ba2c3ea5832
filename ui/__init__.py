# UI module for Pomodoro Timer application
from .main_window import MainWindow
from .timer_page import TimerPage
from .settings_page import SettingsDialog

__all__ = ['MainWindow', 'TimerPage', 'SettingsDialog']
