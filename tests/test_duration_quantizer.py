"""Tests for drag distance to duration mapping."""

import pytest

from drag_timer.models.duration_quantizer import DragGesture, format_display, format_remaining, quantize


@pytest.mark.parametrize("delta", [0, 1, 25, 49, 49.99])
def test_short_drags_give_no_timer(delta):
    assert quantize(delta, 0) == 0
    assert quantize(0, -delta) == 0
    assert quantize(delta, delta, ctrl_held=True, five_minute_mode_enabled=True) == 0
    assert quantize(delta, 0, shift_held=True, seconds_mode_enabled=True) == 0


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (50, 31),
        (60, 41),
        (79, 60),
        (80, 60),
        (84.9, 60),
        (85, 90),
        (129, 330),
        (130, 300),
        (134, 300),
        (135, 360),
        (200, 1140),
    ],
)
def test_bands(delta, expected):
    assert quantize(delta, 0) == expected


def test_larger_axis_wins_and_sign_is_ignored():
    assert quantize(-130, 10) == 300
    assert quantize(3, 85) == 90
    assert quantize(-20, -79) == 60


def test_five_minute_mode():
    assert quantize(50, 0, ctrl_held=True, five_minute_mode_enabled=True) == 300
    assert quantize(54, 0, ctrl_held=True, five_minute_mode_enabled=True) == 300
    assert quantize(55, 0, ctrl_held=True, five_minute_mode_enabled=True) == 600


def test_seconds_mode():
    assert quantize(79, 0, shift_held=True, seconds_mode_enabled=True) == 60
    assert quantize(200, 0, shift_held=True, seconds_mode_enabled=True) == 181


def test_modifiers_need_their_preference():
    assert quantize(100, 0, ctrl_held=True) == 180
    assert quantize(200, 0, shift_held=True) == 1140
    assert quantize(100, 0, ctrl_held=True, seconds_mode_enabled=True) == 180


def test_ctrl_takes_precedence_over_shift():
    result = quantize(
        60, 0, ctrl_held=True, shift_held=True, five_minute_mode_enabled=True, seconds_mode_enabled=True
    )
    assert result == 900


@pytest.mark.parametrize(("low", "high"), [(50, 80), (80, 130), (130, 600)])
def test_non_decreasing_within_a_band(low, high):
    deltas = [low + step / 4 for step in range((high - low) * 4)]
    durations = [quantize(delta, 0) for delta in deltas]
    assert durations == sorted(durations)


def test_quantize_is_stateless():
    first = quantize(142, 17, shift_held=True, seconds_mode_enabled=True)
    quantize(300, 0)
    assert quantize(142, 17, shift_held=True, seconds_mode_enabled=True) == first


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0 sec"),
        (45, "45 sec"),
        (59.9, "59 sec"),
        (60, "1 min 0 sec"),
        (150, "2 min 30 sec"),
        (299, "4 min 59 sec"),
        (300, "5 min"),
        (3600, "60 min"),
        (4500, "1 hr 15 min"),
    ],
)
def test_format_display(seconds, expected):
    assert format_display(seconds) == expected


def test_format_display_can_stay_in_minutes():
    assert format_display(4500, view_as_minutes=True) == "75 min"


def test_format_remaining():
    assert format_remaining(65) == "01:05"
    assert format_remaining(3725) == "1:02:05"
    assert format_remaining(-3) == "00:00"


def test_gesture_tracks_displacement_from_press():
    gesture = DragGesture()
    gesture.begin(100, 100)
    assert gesture.update(100, 100) == 0
    assert not gesture.preview_visible

    assert gesture.update(190, 100) == 120
    assert gesture.preview_visible
    assert gesture.end() == 120
    assert not gesture.active
    assert gesture.duration == 0


def test_gesture_applies_its_modes():
    gesture = DragGesture(seconds_mode_enabled=True)
    gesture.begin(0, 0)
    assert gesture.update(0, 79, shift_held=True) == 60
    assert gesture.update(0, 79) == 60
    assert gesture.update(0, 200, shift_held=True) == 181


def test_gesture_without_press_gives_nothing():
    gesture = DragGesture()
    assert gesture.update(500, 500) == 0
    assert gesture.end() == 0
