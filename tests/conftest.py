"""Shared fakes for the registry tests."""

from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone

import pytest

from drag_timer.models.configuration_model import ConfigurationData
from drag_timer.models.errors import ReminderError, TimerStoreError
from drag_timer.models.notification_service import NotificationService
from drag_timer.models.reminder_service import ReminderService
from drag_timer.models.timer_registry import TimerRegistry
from drag_timer.models.timer_store import TimerStore
from drag_timer.utils.clock import Clock, ScheduledCall

START = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeScheduledCall(ScheduledCall):
    def __init__(self, due: datetime, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class FakeClock(Clock):
    """Manual clock: time only moves when the test calls advance()."""

    def __init__(self, start: datetime = START):
        self.current = start
        self.calls: list[FakeScheduledCall] = []

    def now(self) -> datetime:
        return self.current

    def schedule_once(self, delay_seconds, callback) -> FakeScheduledCall:
        call = FakeScheduledCall(self.current + timedelta(seconds=delay_seconds), callback)
        self.calls.append(call)
        return call

    def pending(self) -> list[FakeScheduledCall]:
        return [call for call in self.calls if call.active]

    def advance(self, seconds: float) -> None:
        target = self.current + timedelta(seconds=seconds)
        while True:
            due = sorted((c for c in self.pending() if c.due <= target), key=lambda c: c.due)
            if not due:
                break
            call = due[0]
            self.current = max(self.current, call.due)
            call.fired = True
            call.callback()
        self.current = target


class InMemoryTimerStore(TimerStore):
    def __init__(self, records=None, fail_on_save=False, fail_on_load=False):
        self.records = list(records or [])
        self.fail_on_save = fail_on_save
        self.fail_on_load = fail_on_load
        self.save_count = 0

    def load_timer_records(self):
        if self.fail_on_load:
            raise TimerStoreError("disk unreadable")
        return [dict(record) for record in self.records]

    def save_timer_records(self, records) -> None:
        if self.fail_on_save:
            raise TimerStoreError("disk full")
        self.save_count += 1
        self.records = [dict(record) for record in records]


class FakeReminderService(ReminderService):
    def __init__(self, fail_create=False, fail_delete=False):
        self.fail_create = fail_create
        self.fail_delete = fail_delete
        self.created: list[tuple[str, str, datetime]] = []
        self.deleted: list[str] = []

    def create_reminder(self, title, notes, due_date) -> str:
        if self.fail_create:
            raise ReminderError("access denied")
        self.created.append((title, notes, due_date))
        return f"reminder-{len(self.created)}"

    def delete_reminder(self, reminder_id) -> None:
        if self.fail_delete:
            raise ReminderError("not found")
        self.deleted.append(reminder_id)


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.notified: list = []

    def notify(self, timer_name) -> None:
        self.notified.append(timer_name)


class ImmediateExecutor(Executor):
    """Runs submitted work on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryTimerStore()


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest.fixture
def reminders():
    return FakeReminderService()


@pytest.fixture
def settings():
    return ConfigurationData()


@pytest.fixture
def make_registry(clock, store, notifications, reminders, settings):
    def _make(**overrides):
        kwargs = {
            "clock": clock,
            "store": store,
            "notification_service": notifications,
            "reminder_service": reminders,
            "settings_provider": lambda: settings,
            "executor": ImmediateExecutor(),
        }
        kwargs.update(overrides)
        return TimerRegistry(**kwargs)

    return _make


@pytest.fixture
def registry(make_registry):
    return make_registry()
