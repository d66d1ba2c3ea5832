"""
Keyboard shortcuts for the timer window.

    Space   start / pause / resume
    R       reset the current period
    S       stop the session (asks for confirmation, only once started)
    Escape  close the open dialog
"""

from enum import Enum, auto
from typing import Optional

from PySide6.QtCore import Qt


class ShortcutAction(Enum):
    TOGGLE = auto()
    RESET = auto()
    STOP = auto()
    CLOSE_DIALOG = auto()


_KEY_ACTIONS = {
    Qt.Key.Key_Space: ShortcutAction.TOGGLE,
    Qt.Key.Key_R: ShortcutAction.RESET,
    Qt.Key.Key_S: ShortcutAction.STOP,
}


def resolve_shortcut(
    key: int,
    has_started: bool,
    dialog_open: bool = False,
    editing_text: bool = False
) -> Optional[ShortcutAction]:
    """
    Map a key press to a timer action.

    Args:
        key: Qt key code.
        has_started: Whether a session is in progress.
        dialog_open: Whether the settings or stop dialog is showing.
        editing_text: Whether a text input has keyboard focus.

    Returns:
        The action to perform, or None to let the key through.
    """
    if editing_text:
        return None

    if key == Qt.Key.Key_Escape:
        return ShortcutAction.CLOSE_DIALOG if dialog_open else None

    if dialog_open:
        return None

    action = _KEY_ACTIONS.get(key)
    if action == ShortcutAction.STOP and not has_started:
        return None
    return action
