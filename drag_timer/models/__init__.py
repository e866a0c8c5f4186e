"""Models package for Drag Timer.

This package contains the timer logic and its collaborators. Modules that
need Qt multimedia or Reminders access (``sound_player``) are imported
directly by the presenter and are not re-exported here.
"""

from .configuration_model import ConfigurationData, ConfigurationModel
from .duration_quantizer import DragGesture, format_display, format_remaining, quantize
from .errors import DragTimerError, ReminderError, TimerStoreError
from .notification_service import NotificationService
from .reminder_service import ReminderService
from .timer_data import Timer
from .timer_registry import TimerRegistry
from .timer_store import JsonTimerStore, TimerStore

__all__ = [
    "ConfigurationData",
    "ConfigurationModel",
    "DragGesture",
    "DragTimerError",
    "JsonTimerStore",
    "NotificationService",
    "ReminderError",
    "ReminderService",
    "Timer",
    "TimerRegistry",
    "TimerStore",
    "TimerStoreError",
    "format_display",
    "format_remaining",
    "quantize",
]
