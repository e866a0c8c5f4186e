"""Clock implementation on top of the Qt event loop."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from PyQt6.QtCore import QObject, Qt, QTimer

from .clock import Clock, ScheduledCall

# QTimer intervals are a signed 32-bit number of milliseconds
MAX_TIMER_INTERVAL_MS = 2**31 - 1


class QtScheduledCall(ScheduledCall):
    """ScheduledCall backed by a single-shot QTimer."""

    def __init__(self, clock: "QtClock", callback: Callable[[], None], delay_seconds: float):
        self._clock = clock
        self._callback = callback
        self._deadline = time.monotonic() + max(0.0, delay_seconds)
        self._timer = QTimer(clock.parent)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.CoarseTimer)
        self._timer.timeout.connect(self._on_timeout)
        self._start()

    def _start(self) -> None:
        remaining_ms = int(max(0.0, self._deadline - time.monotonic()) * 1000)
        self._timer.start(min(remaining_ms, MAX_TIMER_INTERVAL_MS))

    def _on_timeout(self) -> None:
        # Long delays are split into several QTimer rounds
        if self._deadline - time.monotonic() > 0.001:
            self._start()
            return
        self._release()
        self._callback()

    def _release(self) -> None:
        """Drop the QTimer; it must not be touched afterwards."""
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.timeout.disconnect(self._on_timeout)
        self._timer.deleteLater()
        self._timer = None
        self._clock.discard(self)

    def cancel(self) -> None:
        self._release()

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()


class QtClock(Clock):
    """Clock whose callbacks run on the thread of the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None):
        self.logger = logging.getLogger(__name__)
        self.parent = parent
        # QTimers must stay referenced until they fire or are cancelled
        self._pending: set[QtScheduledCall] = set()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def schedule_once(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        call = QtScheduledCall(self, callback, delay_seconds)
        self._pending.add(call)
        self.logger.debug(f"Scheduled callback in {delay_seconds:.1f}s ({len(self._pending)} pending)")
        return call

    def discard(self, call: QtScheduledCall) -> None:
        self._pending.discard(call)

    @property
    def pending_count(self) -> int:
        return len(self._pending)
