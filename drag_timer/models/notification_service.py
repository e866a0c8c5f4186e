"""Timer-finished notifications for Drag Timer."""

import logging
from collections.abc import Callable
from typing import Optional

DEFAULT_TITLE = "Timer up"


def notification_title(timer_name: Optional[str]) -> str:
    return timer_name or DEFAULT_TITLE


def notification_body(timer_name: Optional[str]) -> str:
    if timer_name:
        return f'Your timer "{timer_name}" has finished!'
    return "Your timer has finished!"


class NotificationService:
    """Tells the user that a timer has finished."""

    def notify(self, timer_name: Optional[str]) -> None:
        raise NotImplementedError


class TrayNotificationService(NotificationService):
    """Shows a message next to the tray icon and plays the alarm sound.

    Args:
        show_message: Callable taking ``(title, body)``, usually
            ``StatusBarView.show_message``
        play_alarm: Optional callable that starts the alarm sound
    """

    def __init__(self, show_message: Callable[[str, str], None], play_alarm: Optional[Callable[[], object]] = None):
        self.logger = logging.getLogger(__name__)
        self._show_message = show_message
        self._play_alarm = play_alarm

    def notify(self, timer_name: Optional[str]) -> None:
        title = notification_title(timer_name)
        self._show_message(title, notification_body(timer_name))

        if self._play_alarm is not None:
            try:
                self._play_alarm()
            except Exception:
                self.logger.exception("Failed to play alarm sound")

        self.logger.info(f"Notified timer finished: {title}")
