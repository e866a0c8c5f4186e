"""Drag distance to timer duration mapping.

The drag handle reports how far the pointer has travelled from the point
where the gesture began. The larger axis of that displacement is mapped onto
a banded scale: short drags give second-level precision, longer drags switch
to 30 second and then one minute steps. Two modifier modes override the
bands when they are enabled in the preferences:

* Ctrl held with five-minute mode: 5 minute steps from the first threshold.
* Shift held with seconds mode: 1 second steps from the first threshold.

A duration of 0 means "no timer".
"""

import math
from typing import Optional

# Calibration constants in drag-handle pixels, not seconds
SECOND_THRESHOLD = 50
THIRTY_SECOND_THRESHOLD = 80
MINUTE_THRESHOLD = 130

STEP_PIXELS = 5


def quantize(
    delta_x: float,
    delta_y: float,
    ctrl_held: bool = False,
    shift_held: bool = False,
    five_minute_mode_enabled: bool = False,
    seconds_mode_enabled: bool = False,
) -> int:
    """Convert a drag displacement into a duration in seconds.

    Args:
        delta_x: Horizontal displacement from the gesture start
        delta_y: Vertical displacement from the gesture start
        ctrl_held: Whether the Ctrl modifier is held
        shift_held: Whether the Shift modifier is held
        five_minute_mode_enabled: Preference allowing Ctrl-drag 5 minute steps
        seconds_mode_enabled: Preference allowing Shift-drag 1 second steps

    Returns:
        Duration in whole seconds, 0 when the drag is too short
    """
    max_delta = max(abs(delta_x), abs(delta_y))

    if max_delta < SECOND_THRESHOLD:
        return 0

    if ctrl_held and five_minute_mode_enabled:
        return (math.floor((max_delta - SECOND_THRESHOLD) / STEP_PIXELS) + 1) * 300

    if shift_held and seconds_mode_enabled:
        return 30 + math.floor(max_delta - SECOND_THRESHOLD) + 1

    if max_delta < THIRTY_SECOND_THRESHOLD:
        return 30 + math.floor(max_delta - SECOND_THRESHOLD) + 1
    if max_delta < MINUTE_THRESHOLD:
        return 60 + math.floor((max_delta - THIRTY_SECOND_THRESHOLD) / STEP_PIXELS) * 30
    return 300 + math.floor((max_delta - MINUTE_THRESHOLD) / STEP_PIXELS) * 60


def format_display(seconds: float, view_as_minutes: bool = False) -> str:
    """Format a duration for the drag preview.

    Args:
        seconds: Duration in seconds
        view_as_minutes: Keep showing minutes above one hour

    Returns:
        Text such as "45 sec", "2 min 30 sec", "25 min" or "1 hr 15 min"
    """
    total = int(seconds)
    if total < 60:
        return f"{total} sec"
    if total < 300:
        minutes = total // 60
        return f"{minutes} min {total - minutes * 60} sec"
    if total <= 3600 or view_as_minutes:
        return f"{total // 60} min"
    hours = total // 3600
    return f"{hours} hr {(total - hours * 3600) // 60} min"


def format_remaining(seconds: float) -> str:
    """Format a countdown as MM:SS, or H:MM:SS from one hour up."""
    total = int(max(0.0, seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class DragGesture:
    """Tracks a single drag from press to release.

    The gesture keeps only the start position and the latest duration, so
    ``update`` can be called on every mouse move.
    """

    def __init__(self, five_minute_mode_enabled: bool = False, seconds_mode_enabled: bool = False):
        self.five_minute_mode_enabled = five_minute_mode_enabled
        self.seconds_mode_enabled = seconds_mode_enabled
        self._start: Optional[tuple[float, float]] = None
        self._duration = 0

    @property
    def active(self) -> bool:
        return self._start is not None

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def preview_visible(self) -> bool:
        """A preview is shown only while the drag maps to a real timer."""
        return self.active and self._duration > 0

    def begin(self, x: float, y: float) -> None:
        self._start = (x, y)
        self._duration = 0

    def update(self, x: float, y: float, ctrl_held: bool = False, shift_held: bool = False) -> int:
        """Recompute the duration for the current pointer position."""
        if self._start is None:
            return 0
        start_x, start_y = self._start
        self._duration = quantize(
            x - start_x,
            y - start_y,
            ctrl_held=ctrl_held,
            shift_held=shift_held,
            five_minute_mode_enabled=self.five_minute_mode_enabled,
            seconds_mode_enabled=self.seconds_mode_enabled,
        )
        return self._duration

    def end(self) -> int:
        """Finish the gesture and return the final duration (0 for none)."""
        duration = self._duration if self._start is not None else 0
        self._start = None
        self._duration = 0
        return duration
