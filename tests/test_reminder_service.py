"""Tests for the pyremindkit-backed reminder service, against a stand-in RemindKit."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from drag_timer.models.configuration_model import ConfigurationModel
from drag_timer.models.errors import (
    ReminderAccessDeniedError,
    ReminderError,
    ReminderListNotFoundError,
    ReminderNotFoundError,
)
from drag_timer.models.reminder_service import RemindKitReminderService


class StubCalendars:
    def __init__(self):
        self.items = [SimpleNamespace(id="cal-1", name="Reminders"), SimpleNamespace(id="cal-2", name="Work")]

    def list(self):
        return self.items

    def get_default(self):
        return self.items[0]


class StubRemindKit:
    def __init__(self, error=None):
        self.calendars = StubCalendars()
        self.error = error
        self.created = []
        self.deleted = []

    def create_reminder(self, **kwargs):
        if self.error:
            raise self.error
        self.created.append(kwargs)
        return SimpleNamespace(id=f"rem-{len(self.created)}")

    def delete_reminder(self, reminder_id):
        if self.error:
            raise self.error
        self.deleted.append(reminder_id)


@pytest.fixture
def config_model(tmp_path):
    return ConfigurationModel(str(tmp_path / "config.json"))


def _service(config_model, kit):
    service = RemindKitReminderService(config_model)
    service._remind_kit = kit
    return service


def test_create_uses_naive_local_due_date(config_model):
    kit = StubRemindKit()
    due = datetime(2024, 5, 1, 9, 10, tzinfo=timezone.utc)

    reminder_id = _service(config_model, kit).create_reminder("Pasta", "notes", due)

    assert reminder_id == "rem-1"
    (call,) = kit.created
    assert call["title"] == "Pasta"
    assert call["calendar_id"] is None
    assert call["due_date"].tzinfo is None
    assert call["due_date"] == due.astimezone().replace(tzinfo=None)


def test_create_in_selected_list(config_model):
    config_model.update_configuration(selected_reminder_list="cal-2")
    kit = StubRemindKit()

    _service(config_model, kit).create_reminder("Pasta", None, datetime.now(timezone.utc))

    assert kit.created[0]["calendar_id"] == "cal-2"


def test_missing_list_raises(config_model):
    config_model.update_configuration(selected_reminder_list="gone")
    with pytest.raises(ReminderListNotFoundError):
        _service(config_model, StubRemindKit()).create_reminder("Pasta", None, datetime.now(timezone.utc))


def test_access_errors_are_classified(config_model):
    service = _service(config_model, StubRemindKit(error=RuntimeError("Access to reminders not granted")))
    with pytest.raises(ReminderAccessDeniedError):
        service.create_reminder("Pasta", None, datetime.now(timezone.utc))


def test_delete(config_model):
    kit = StubRemindKit()
    _service(config_model, kit).delete_reminder("rem-9")
    assert kit.deleted == ["rem-9"]


def test_delete_missing_reminder(config_model):
    service = _service(config_model, StubRemindKit(error=KeyError("Reminder not found")))
    with pytest.raises(ReminderNotFoundError):
        service.delete_reminder("rem-9")


def test_other_failures_are_reminder_errors(config_model):
    service = _service(config_model, StubRemindKit(error=RuntimeError("EventKit exploded")))
    with pytest.raises(ReminderError):
        service.delete_reminder("rem-9")


def test_list_reminder_lists(config_model):
    assert _service(config_model, StubRemindKit()).list_reminder_lists() == [("cal-1", "Reminders"), ("cal-2", "Work")]


def test_list_reminder_lists_when_unavailable(config_model, monkeypatch):
    service = RemindKitReminderService(config_model)

    def unavailable():
        raise ReminderError("no EventKit")

    monkeypatch.setattr(service, "_get_remind_kit", unavailable)
    assert service.list_reminder_lists() == []
