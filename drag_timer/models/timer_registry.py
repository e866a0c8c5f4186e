"""Timer Registry for Drag Timer.

This module contains the TimerRegistry class, the single owner of the
live set of countdown timers. It schedules expiry through a Clock, writes
the whole live set to a TimerStore after every change, and mirrors timers
into an optional ReminderService.

All public methods are expected to run on one thread (the Qt main thread in
the application). Reminder deletion is the only work handed to a background
thread, and it never touches the live set.
"""

import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from datetime import timedelta
from typing import Any, Optional

from ..utils.clock import Clock, ScheduledCall
from .configuration_model import ConfigurationData
from .errors import ReminderError, TimerStoreError
from .notification_service import NotificationService
from .reminder_service import ReminderService
from .timer_data import Timer
from .timer_store import TimerStore


class TimerRegistry:
    """Owns the active timers and their expiry callbacks."""

    # Timers that ended while the app was closed fire shortly after startup
    RESTORE_EXPIRY_DELAY = 1.0

    def __init__(
        self,
        clock: Clock,
        store: TimerStore,
        notification_service: NotificationService,
        reminder_service: Optional[ReminderService] = None,
        settings_provider: Optional[Callable[[], ConfigurationData]] = None,
        executor: Optional[Executor] = None,
    ):
        """Initialize the TimerRegistry.

        Args:
            clock: Source of time and one-shot scheduling
            store: Storage for the serialized live set
            notification_service: Receives timer-finished notifications
            reminder_service: Optional reminders store mirror
            settings_provider: Returns the current preferences (reminder policy)
            executor: Runs reminder deletions; a single worker thread by default
        """
        self.logger = logging.getLogger(__name__)
        self._clock = clock
        self._store = store
        self._notification_service = notification_service
        self._reminder_service = reminder_service
        self._settings_provider = settings_provider or ConfigurationData

        self._executor = executor
        self._owns_executor = executor is None
        self._pending_tasks: set[Future] = set()
        self._pending_lock = threading.Lock()

        # Insertion ordered, so iteration follows creation order
        self._timers: dict[str, Timer] = {}
        self._handles: dict[str, ScheduledCall] = {}

        self._timers_changed_callbacks: list[Callable[[list[Timer]], None]] = []

    def create(self, duration: float, name: Optional[str] = None) -> Optional[Timer]:
        """Start a timer.

        Args:
            duration: Length in seconds; nothing happens unless positive
            name: Optional label; blank names count as no name

        Returns:
            The new Timer, or None when ``duration`` is not positive
        """
        if duration <= 0:
            self.logger.debug(f"Ignoring timer with non-positive duration {duration}")
            return None

        name = name.strip() if name else None
        name = name or None

        timer_id = str(uuid.uuid4())
        start_time = self._clock.now()
        reminder_id = self._create_reminder(duration, name, start_time + timedelta(seconds=duration))

        timer = Timer(
            timer_id=timer_id,
            start_time=start_time,
            duration=duration,
            name=name,
            reminder_id=reminder_id,
        )
        self._timers[timer_id] = timer
        self._schedule_expiry(timer_id, duration)

        self.logger.info(f"Timer created: {timer}", extra={"timer_id": timer_id, "has_reminder": bool(reminder_id)})
        self._persist()
        self._notify_timers_changed()
        return timer

    def cancel(self, timer_id: str) -> None:
        """Cancel a timer. Unknown ids are ignored."""
        timer = self._timers.pop(timer_id, None)
        if timer is None:
            self.logger.debug(f"Cancel ignored, no active timer {timer_id}")
            return

        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

        self.logger.info(f"Timer cancelled: {timer}", extra={"timer_id": timer_id})
        self._persist()
        self._notify_timers_changed()

        if timer.reminder_id and self._reminder_service is not None and self._settings_provider().delete_reminders:
            self._delete_reminder_in_background(timer.reminder_id)

    def expire(self, timer_id: str) -> None:
        """Finish a timer whose duration has elapsed.

        Runs from the expiry callback. A timer that was already cancelled or
        expired is left alone, so only the first of a cancel/expire pair wins.
        """
        timer = self._timers.pop(timer_id, None)
        if timer is None:
            self.logger.debug(f"Expiry ignored, timer {timer_id} already removed")
            return

        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

        self.logger.info(f"Timer finished: {timer}", extra={"timer_id": timer_id})
        try:
            self._notification_service.notify(timer.name)
        except Exception:
            self.logger.exception("Failed to deliver timer notification", extra={"timer_id": timer_id})

        self._persist()
        self._notify_timers_changed()

    def restore(self, records: Iterable[dict[str, Any]]) -> list[Timer]:
        """Rebuild timers from stored records.

        Timers with time left are rescheduled for the remainder. Timers whose
        end passed while the app was not running are kept and expire after
        RESTORE_EXPIRY_DELAY so the user still gets notified.

        Returns:
            The restored timers, in record order
        """
        now = self._clock.now()
        restored: list[Timer] = []

        for record in records:
            try:
                timer = Timer.from_record(record)
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping malformed saved timer {record!r}: {e}")
                continue

            if timer.id in self._timers:
                self.logger.warning(f"Skipping saved timer {timer.id}, already active")
                continue

            remaining = timer.remaining(now)
            if remaining > 0:
                delay = remaining
            else:
                delay = self.RESTORE_EXPIRY_DELAY
                self.logger.info(f"Timer {timer.id} expired while the app was not running")

            self._timers[timer.id] = timer
            self._schedule_expiry(timer.id, delay)
            restored.append(timer)

        self.logger.info(f"Restored {len(restored)} timer(s)")
        self._persist()
        if restored:
            self._notify_timers_changed()
        return restored

    def load_saved_timers(self) -> list[Timer]:
        """Restore whatever the store holds; an unreadable store restores nothing."""
        try:
            records = self._store.load_timer_records()
        except TimerStoreError as e:
            self.logger.error(f"Could not load saved timers: {e}")
            return []
        return self.restore(records)

    def active_timers(self) -> list[Timer]:
        """Live timers in creation order."""
        return list(self._timers.values())

    def get_timer(self, timer_id: str) -> Optional[Timer]:
        return self._timers.get(timer_id)

    def display_name(self, timer: Timer) -> str:
        """The timer's name, or "Timer N" from its position in the live set."""
        if timer.name:
            return timer.name
        for index, timer_id in enumerate(self._timers, start=1):
            if timer_id == timer.id:
                return f"Timer {index}"
        return "Timer"

    def add_timers_changed_callback(self, callback: Callable[[list[Timer]], None]) -> None:
        """Add callback invoked with the active timers after every change."""
        self._timers_changed_callbacks.append(callback)

    def remove_timers_changed_callback(self, callback: Callable[[list[Timer]], None]) -> bool:
        try:
            self._timers_changed_callbacks.remove(callback)
            return True
        except ValueError:
            return False

    def wait_for_pending_reminder_tasks(self, timeout: Optional[float] = None) -> bool:
        """Block until background reminder deletions finish.

        Returns:
            True if nothing is still running
        """
        with self._pending_lock:
            pending = list(self._pending_tasks)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        """Stop expiry callbacks and the reminder worker. Timers stay saved."""
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait_for_tasks)
            self._executor = None

    def _schedule_expiry(self, timer_id: str, delay: float) -> None:
        self._handles[timer_id] = self._clock.schedule_once(delay, lambda: self.expire(timer_id))

    def _create_reminder(self, duration: float, name: Optional[str], due_date) -> Optional[str]:
        if self._reminder_service is None or not self._settings_provider().should_create_reminder(duration):
            return None

        title = name or f"Timer {len(self._timers) + 1}"
        notes = f"Your timer for {int(duration // 60)} minute(s) has finished."
        try:
            return self._reminder_service.create_reminder(title, notes, due_date)
        except ReminderError as e:
            self.logger.warning(f"Failed to create reminder: {e}")
        except Exception:
            self.logger.exception("Unexpected error while creating reminder")
        return None

    def _delete_reminder_in_background(self, reminder_id: str) -> None:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="reminder-delete")
            self._owns_executor = True

        try:
            future = self._executor.submit(self._delete_reminder, reminder_id)
        except RuntimeError:
            self.logger.warning(f"Reminder worker stopped, not deleting reminder {reminder_id}")
            return

        with self._pending_lock:
            self._pending_tasks.add(future)
        future.add_done_callback(self._discard_task)

    def _discard_task(self, future: Future) -> None:
        with self._pending_lock:
            self._pending_tasks.discard(future)

    def _delete_reminder(self, reminder_id: str) -> None:
        try:
            self._reminder_service.delete_reminder(reminder_id)
            self.logger.debug(f"Deleted reminder {reminder_id}")
        except ReminderError as e:
            self.logger.warning(f"Failed to delete reminder {reminder_id}: {e}")
        except Exception:
            self.logger.exception(f"Unexpected error deleting reminder {reminder_id}")

    def _persist(self) -> None:
        records = [timer.to_record() for timer in self._timers.values()]
        try:
            self._store.save_timer_records(records)
        except TimerStoreError as e:
            self.logger.error(f"Could not save timers: {e}")
        except Exception:
            self.logger.exception("Unexpected error saving timers")

    def _notify_timers_changed(self) -> None:
        timers = self.active_timers()
        for callback in self._timers_changed_callbacks:
            try:
                callback(timers)
            except Exception:
                self.logger.exception("Error in timers changed callback", extra={"callback": str(callback)})
