"""Timer data structures for Drag Timer.

This module contains the Timer value object owned by the TimerRegistry
and its conversion to and from stored records.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Optional


def _parse_start_time(value: Any) -> datetime:
    """Accept an ISO-8601 string or an epoch timestamp."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value)
    else:
        raise TypeError(f"Unsupported start_time value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


class Timer:
    """Data class representing one countdown timer."""

    def __init__(
        self,
        timer_id: str,
        start_time: datetime,
        duration: float,
        name: Optional[str] = None,
        reminder_id: Optional[str] = None,
    ):
        if not math.isfinite(duration) or duration < 0:
            raise ValueError(f"Timer duration must be finite and non-negative, got {duration}")
        try:
            self._end_time = start_time + timedelta(seconds=duration)
        except OverflowError as e:
            raise ValueError(f"Timer duration {duration} is out of range") from e
        self._id = timer_id
        self._name = name
        self._start_time = start_time
        self._duration = float(duration)
        self._reminder_id = reminder_id

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def start_time(self) -> datetime:
        return self._start_time

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def reminder_id(self) -> Optional[str]:
        return self._reminder_id

    @property
    def end_time(self) -> datetime:
        return self._end_time

    def remaining(self, now: datetime) -> float:
        """Seconds left until the timer ends; negative once it has passed."""
        return (self.end_time - now).total_seconds()

    def to_record(self) -> dict[str, Any]:
        """Convert the timer to a JSON-serializable record."""
        return {
            "id": self._id,
            "name": self._name,
            "start_time": self._start_time.isoformat(),
            "duration": self._duration,
            "reminder_id": self._reminder_id,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Timer":
        """Rebuild a timer from a stored record.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        timer_id = record["id"]
        if not isinstance(timer_id, str) or not timer_id:
            raise ValueError(f"Invalid timer id: {timer_id!r}")

        name = record.get("name")
        return cls(
            timer_id=timer_id,
            start_time=_parse_start_time(record["start_time"]),
            duration=float(record["duration"]),
            name=name if name else None,
            reminder_id=record.get("reminder_id"),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timer):
            return NotImplemented
        return self.to_record() == other.to_record()

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        label = self._name or "<unnamed>"
        return f"{label} ({self._duration:.0f}s, ends {self.end_time.strftime('%H:%M:%S')})"

    def __repr__(self) -> str:
        return f"Timer(id='{self._id}', name={self._name!r}, duration={self._duration})"
