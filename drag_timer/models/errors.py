"""Exception types for Drag Timer."""


class DragTimerError(Exception):
    """Base class for all Drag Timer errors."""


class ReminderError(DragTimerError):
    """A reminder could not be created or deleted."""


class ReminderAccessDeniedError(ReminderError):
    """The reminders store refused access."""


class ReminderListNotFoundError(ReminderError):
    """The configured reminder list does not exist."""


class ReminderNotFoundError(ReminderError):
    """No reminder exists with the given identifier."""


class TimerStoreError(DragTimerError):
    """Saved timers could not be read or written."""


class LoginItemError(DragTimerError):
    """The start-at-login entry could not be changed."""
