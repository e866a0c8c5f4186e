"""Clock abstraction used by the timer registry.

The registry only needs wall-clock time and one-shot callbacks. Callbacks
must be delivered on the thread that owns the registry.
"""

from collections.abc import Callable
from datetime import datetime


class ScheduledCall:
    """Handle for a pending one-shot callback."""

    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def active(self) -> bool:
        raise NotImplementedError


class Clock:
    """Source of wall-clock time and one-shot scheduling."""

    def now(self) -> datetime:
        raise NotImplementedError

    def schedule_once(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        raise NotImplementedError
