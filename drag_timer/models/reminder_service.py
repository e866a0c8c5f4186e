"""Reminder Service for Drag Timer.

This module contains the RemindKitReminderService class that mirrors
timers into the macOS Reminders app through pyremindkit.
"""

from datetime import datetime
from typing import Any, Optional

from ..utils.structured_logging import EnhancedLoggerMixin, timed_operation
from .configuration_model import ConfigurationModel
from .errors import ReminderAccessDeniedError, ReminderError, ReminderListNotFoundError, ReminderNotFoundError


def _looks_like_access_error(error: Exception) -> bool:
    message = str(error).lower()
    return "unauthor" in message or "access" in message or "permission" in message


def _looks_like_missing_error(error: Exception) -> bool:
    message = str(error).lower()
    return "not found" in message or "no reminder" in message


class ReminderService:
    """Creates and deletes reminders in an external reminders store."""

    def create_reminder(self, title: str, notes: Optional[str], due_date: datetime) -> str:
        raise NotImplementedError

    def delete_reminder(self, reminder_id: str) -> None:
        raise NotImplementedError


class RemindKitReminderService(EnhancedLoggerMixin, ReminderService):
    """ReminderService backed by pyremindkit.

    RemindKit is created on first use so the app starts even when the user
    has not granted Reminders access yet.
    """

    def __init__(self, config_model: Optional[ConfigurationModel] = None):
        EnhancedLoggerMixin.__init__(self)
        self._config_model = config_model
        self._remind_kit: Optional[Any] = None
        self.structured_logger.update_context(service_type="reminders")

    def _get_remind_kit(self):
        if self._remind_kit is not None:
            return self._remind_kit
        try:
            # pyremindkit needs EventKit, so it is only loaded once a reminder is requested
            from pyremindkit import RemindKit

            self._remind_kit = RemindKit()
            default_calendar = self._remind_kit.calendars.get_default()
            self.structured_logger.info("RemindKit initialized", default_calendar=default_calendar.name)
        except Exception as e:
            self._remind_kit = None
            if _looks_like_access_error(e):
                raise ReminderAccessDeniedError(f"Reminders access denied: {e}") from e
            raise ReminderError(f"Could not initialize RemindKit: {e}") from e
        return self._remind_kit

    def _selected_calendar_id(self, remind_kit) -> Optional[str]:
        """Return the configured list id, or None for the default list."""
        if self._config_model is None:
            return None
        list_id = self._config_model.config_data.selected_reminder_list
        if not list_id:
            return None
        if list_id not in {calendar.id for calendar in remind_kit.calendars.list()}:
            raise ReminderListNotFoundError(f"Reminder list {list_id} does not exist")
        return list_id

    def list_reminder_lists(self) -> list[tuple[str, str]]:
        """Return ``(id, name)`` pairs for every reminder list.

        Returns an empty list when Reminders cannot be reached.
        """
        try:
            remind_kit = self._get_remind_kit()
            return [(calendar.id, calendar.name) for calendar in remind_kit.calendars.list()]
        except Exception as e:
            self.log_error_with_context(e, "list_reminder_lists")
            return []

    @timed_operation("create_reminder")
    def create_reminder(self, title: str, notes: Optional[str], due_date: datetime) -> str:
        """Create a reminder due at ``due_date``.

        Returns:
            Identifier of the new reminder

        Raises:
            ReminderError: If the reminder could not be created
        """
        remind_kit = self._get_remind_kit()
        calendar_id = self._selected_calendar_id(remind_kit)

        # RemindKit works with naive local datetimes
        local_due = due_date.astimezone().replace(tzinfo=None) if due_date.tzinfo else due_date
        try:
            reminder = remind_kit.create_reminder(
                title=title,
                due_date=local_due,
                notes=notes,
                calendar_id=calendar_id,
            )
        except Exception as e:
            if _looks_like_access_error(e):
                raise ReminderAccessDeniedError(str(e)) from e
            raise ReminderError(f"Reminder creation failed: {e}") from e

        self.structured_logger.info("Reminder created", reminder_id=reminder.id, due=local_due.isoformat())
        return reminder.id

    @timed_operation("delete_reminder")
    def delete_reminder(self, reminder_id: str) -> None:
        """Delete the reminder with ``reminder_id``.

        Raises:
            ReminderError: If the reminder could not be deleted
        """
        remind_kit = self._get_remind_kit()
        try:
            remind_kit.delete_reminder(reminder_id)
        except Exception as e:
            if _looks_like_access_error(e):
                raise ReminderAccessDeniedError(str(e)) from e
            if _looks_like_missing_error(e):
                raise ReminderNotFoundError(f"Reminder {reminder_id} not found") from e
            raise ReminderError(f"Reminder deletion failed: {e}") from e

        self.structured_logger.info("Reminder deleted", reminder_id=reminder_id)
