"""Tests for the timer registry lifecycle, persistence and reminder mirroring."""

from datetime import timedelta

from drag_timer.models.notification_service import NotificationService
from drag_timer.models.timer_store import JsonTimerStore

from conftest import START


def _snapshot(timers):
    return [(t.id, t.name, t.start_time, t.duration) for t in timers]


def _record(timer_id, started_seconds_ago, duration, name=None, reminder_id=None):
    return {
        "id": timer_id,
        "name": name,
        "start_time": (START - timedelta(seconds=started_seconds_ago)).isoformat(),
        "duration": duration,
        "reminder_id": reminder_id,
    }


def test_non_positive_duration_is_ignored(registry, store):
    assert registry.create(0, "x") is None
    assert registry.create(-5) is None
    assert registry.active_timers() == []
    assert store.save_count == 0


def test_create_persists_the_live_set(registry, store):
    timer = registry.create(10, "Coffee")

    assert registry.active_timers() == [timer]
    assert timer.start_time == START
    assert store.records == [
        {
            "id": timer.id,
            "name": "Coffee",
            "start_time": START.isoformat(),
            "duration": 10.0,
            "reminder_id": None,
        }
    ]


def test_blank_name_counts_as_unnamed(registry):
    assert registry.create(10, "   ").name is None
    assert registry.create(10, "  Tea ").name == "Tea"


def test_timers_are_listed_in_creation_order(registry):
    registry.create(60, "a")
    registry.create(30, "b")
    registry.create(90, "c")
    assert [t.name for t in registry.active_timers()] == ["a", "b", "c"]


def test_ids_are_unique(registry):
    ids = {registry.create(10).id for _ in range(20)}
    assert len(ids) == 20


def test_timer_expires_after_its_duration(registry, clock, store, notifications):
    registry.create(10, "Tea")

    clock.advance(9.9)
    assert len(registry.active_timers()) == 1
    assert notifications.notified == []

    clock.advance(0.2)
    assert registry.active_timers() == []
    assert notifications.notified == ["Tea"]
    assert store.records == []


def test_unnamed_timer_notifies_without_name(registry, clock, notifications):
    registry.create(5)
    clock.advance(5)
    assert notifications.notified == [None]


def test_cancel_before_expiry_never_notifies(registry, clock, store, notifications):
    timer = registry.create(10, "Coffee")
    registry.cancel(timer.id)

    clock.advance(20)
    assert registry.active_timers() == []
    assert notifications.notified == []
    assert store.records == []


def test_cancel_is_idempotent(registry, store):
    timer = registry.create(10)
    registry.cancel(timer.id)
    saves = store.save_count

    registry.cancel(timer.id)
    registry.cancel("no-such-timer")
    assert store.save_count == saves
    assert registry.active_timers() == []


def test_expire_then_cancel_removes_once(registry, clock, notifications):
    timer = registry.create(10)
    registry.expire(timer.id)
    registry.cancel(timer.id)
    clock.advance(20)

    assert registry.active_timers() == []
    assert notifications.notified == [None]


def test_cancel_then_expire_does_not_notify(registry, notifications):
    timer = registry.create(10)
    registry.cancel(timer.id)
    registry.expire(timer.id)

    assert registry.active_timers() == []
    assert notifications.notified == []


def test_notification_failure_still_removes_timer(make_registry, clock, store):
    class BrokenNotifications(NotificationService):
        def notify(self, timer_name):
            raise RuntimeError("tray gone")

    registry = make_registry(notification_service=BrokenNotifications())
    registry.create(10)
    clock.advance(10)

    assert registry.active_timers() == []
    assert store.records == []


def test_restore_round_trip(registry, make_registry, store):
    registry.create(600, "Pasta")
    registry.create(90)
    originals = registry.active_timers()

    restored = make_registry().restore(store.load_timer_records())

    assert _snapshot(restored) == _snapshot(originals)


def test_restore_reschedules_remaining_time(registry, clock, notifications):
    registry.restore([_record("a", started_seconds_ago=30, duration=60, name="Bread")])

    clock.advance(29)
    assert [t.id for t in registry.active_timers()] == ["a"]

    clock.advance(1.5)
    assert registry.active_timers() == []
    assert notifications.notified == ["Bread"]


def test_restore_fires_timers_that_ended_while_closed(registry, clock, store, notifications):
    restored = registry.restore([_record("late", started_seconds_ago=120, duration=60, name="Laundry")])

    assert [t.id for t in restored] == ["late"]
    assert notifications.notified == []

    clock.advance(registry.RESTORE_EXPIRY_DELAY)
    assert notifications.notified == ["Laundry"]
    assert registry.active_timers() == []
    assert store.records == []


def test_restore_skips_malformed_records(registry):
    records = [
        {"id": "missing-fields"},
        {"id": "", "start_time": START.isoformat(), "duration": 10},
        {"id": "bad-date", "start_time": "not a date", "duration": 10},
        {"id": "negative", "start_time": START.isoformat(), "duration": -1},
        {"id": "huge", "start_time": START.isoformat(), "duration": 1e300},
        {"id": "infinite", "start_time": START.isoformat(), "duration": float("inf")},
        {"id": "not-a-number", "start_time": START.isoformat(), "duration": float("nan")},
        _record("good", started_seconds_ago=0, duration=30),
    ]

    restored = registry.restore(records)

    assert [t.id for t in restored] == ["good"]
    assert [t.id for t in registry.active_timers()] == ["good"]


def test_restore_accepts_epoch_start_time(registry):
    record = {"id": "epoch", "start_time": START.timestamp(), "duration": 30}
    (timer,) = registry.restore([record])
    assert timer.start_time == START
    assert timer.name is None


def test_restore_ignores_ids_already_live(registry):
    registry.restore([_record("a", started_seconds_ago=0, duration=30)])
    restored = registry.restore([_record("a", started_seconds_ago=0, duration=30)])

    assert restored == []
    assert len(registry.active_timers()) == 1


def test_load_saved_timers_reads_the_store(make_registry, store):
    store.records = [_record("a", started_seconds_ago=10, duration=60)]
    registry = make_registry()

    assert [t.id for t in registry.load_saved_timers()] == ["a"]


def test_unreadable_store_restores_nothing(registry, store):
    store.fail_on_load = True
    assert registry.load_saved_timers() == []
    assert registry.active_timers() == []


def test_save_failure_keeps_in_memory_state(registry, clock, store, notifications):
    store.fail_on_save = True

    first = registry.create(10, "kept")
    second = registry.create(20)
    assert registry.active_timers() == [first, second]

    registry.cancel(second.id)
    clock.advance(10)
    assert notifications.notified == ["kept"]
    assert registry.active_timers() == []


def test_no_reminder_when_disabled(registry, reminders):
    timer = registry.create(600, "Pasta")
    assert reminders.created == []
    assert timer.reminder_id is None


def test_reminder_created_when_enabled(registry, reminders, settings, store):
    settings.allow_reminders = True

    timer = registry.create(600, "Pasta")

    assert reminders.created == [
        ("Pasta", "Your timer for 10 minute(s) has finished.", START + timedelta(seconds=600))
    ]
    assert timer.reminder_id == "reminder-1"
    assert store.records[0]["reminder_id"] == "reminder-1"


def test_unnamed_reminder_is_numbered(registry, reminders, settings):
    settings.allow_reminders = True
    registry.create(90)
    registry.create(90)
    assert [title for title, _, _ in reminders.created] == ["Timer 1", "Timer 2"]


def test_short_timers_can_skip_reminders(registry, reminders, settings):
    settings.allow_reminders = True
    settings.ignore_short_timers = True
    settings.short_timer_threshold_minutes = 5

    assert registry.create(300).reminder_id is None
    assert registry.create(301).reminder_id is not None
    assert len(reminders.created) == 1


def test_reminder_failure_does_not_block_timer(registry, reminders, settings):
    settings.allow_reminders = True
    reminders.fail_create = True

    timer = registry.create(600)

    assert timer is not None
    assert timer.reminder_id is None
    assert registry.active_timers() == [timer]


def test_registry_without_reminder_service(make_registry, settings):
    settings.allow_reminders = True
    registry = make_registry(reminder_service=None)

    timer = registry.create(600)
    registry.cancel(timer.id)
    assert registry.active_timers() == []


def test_cancel_deletes_reminder(registry, reminders, settings):
    settings.allow_reminders = True
    timer = registry.create(600)

    registry.cancel(timer.id)

    assert registry.wait_for_pending_reminder_tasks(timeout=1)
    assert reminders.deleted == [timer.reminder_id]


def test_cancel_keeps_reminder_when_deletion_disabled(registry, reminders, settings):
    settings.allow_reminders = True
    settings.delete_reminders = False
    timer = registry.create(600)

    registry.cancel(timer.id)

    assert reminders.deleted == []


def test_reminder_deletion_failure_keeps_cancellation(registry, reminders, settings, store):
    settings.allow_reminders = True
    reminders.fail_delete = True
    timer = registry.create(600)

    registry.cancel(timer.id)

    assert registry.active_timers() == []
    assert store.records == []


def test_expiry_leaves_reminder_in_place(registry, clock, reminders, settings):
    settings.allow_reminders = True
    registry.create(600)
    clock.advance(600)
    assert reminders.deleted == []


def test_reminder_deletion_on_worker_thread(make_registry, reminders, settings):
    settings.allow_reminders = True
    registry = make_registry(executor=None)
    timer = registry.create(600)

    registry.cancel(timer.id)

    assert registry.wait_for_pending_reminder_tasks(timeout=5)
    assert reminders.deleted == [timer.reminder_id]
    registry.shutdown()


def test_change_callbacks_receive_live_set(registry, clock):
    seen = []
    registry.add_timers_changed_callback(lambda timers: seen.append([t.name for t in timers]))

    first = registry.create(10, "a")
    registry.create(20, "b")
    registry.cancel(first.id)
    clock.advance(20)

    assert seen == [["a"], ["a", "b"], ["b"], []]


def test_failing_callback_does_not_break_registry(registry):
    def broken(timers):
        raise RuntimeError("view gone")

    registry.add_timers_changed_callback(broken)
    assert registry.create(10) is not None
    assert registry.remove_timers_changed_callback(broken)
    assert not registry.remove_timers_changed_callback(broken)


def test_display_name_numbers_unnamed_timers_by_position(registry):
    first = registry.create(10)
    second = registry.create(10)
    named = registry.create(10, "Eggs")

    assert registry.display_name(first) == "Timer 1"
    assert registry.display_name(second) == "Timer 2"
    assert registry.display_name(named) == "Eggs"

    registry.cancel(first.id)
    assert registry.display_name(second) == "Timer 1"
    assert registry.display_name(first) == "Timer"


def test_shutdown_stops_expiry_but_keeps_timers_saved(registry, clock, store, notifications):
    registry.create(10)
    registry.shutdown()
    clock.advance(20)

    assert notifications.notified == []
    assert len(store.records) == 1


def test_infinite_duration_from_disk_does_not_stop_startup(make_registry, tmp_path):
    path = tmp_path / "timers.json"
    path.write_text(
        '{"saved_timers": ['
        '{"id": "inf", "start_time": "2024-05-01T09:00:00+00:00", "duration": Infinity},'
        '{"id": "ok", "start_time": "2024-05-01T09:00:00+00:00", "duration": 30}'
        "]}",
        encoding="utf-8",
    )
    registry = make_registry(store=JsonTimerStore(str(path)))

    assert [t.id for t in registry.load_saved_timers()] == ["ok"]


def test_get_timer(registry):
    timer = registry.create(10, "Tea")
    assert registry.get_timer(timer.id) is timer

    registry.cancel(timer.id)
    assert registry.get_timer(timer.id) is None
