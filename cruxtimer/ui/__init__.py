"""UI package."""

from .timer_widget import TimerWidget
from .settings_bar import SettingsBar

__all__ = [
    "TimerWidget",
    "SettingsBar",
]
