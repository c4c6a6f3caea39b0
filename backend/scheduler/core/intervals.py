"""Time range primitives used by every availability and capacity check.

Ranges are half-open: ``[start, end)``. A meeting ending exactly when another
starts does not overlap it. All datetimes handled by the core are aware UTC;
``to_utc`` is applied at every boundary where caller or stored values enter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from scheduler.core.exceptions import InvalidInputError


def to_utc(moment: datetime) -> datetime:
    """Aware UTC copy of ``moment``; naive values are taken to be UTC already."""
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime

    @classmethod
    def checked(cls, start: datetime, end: datetime) -> "TimeRange":
        """Build a range from caller input, rejecting ``end <= start``."""
        start, end = to_utc(start), to_utc(end)
        if end <= start:
            raise InvalidInputError("end must be after start")
        return cls(start, end)

    @classmethod
    def from_duration(cls, start: datetime, minutes: int) -> "TimeRange":
        if minutes <= 0:
            raise InvalidInputError("duration must be greater than 0 minutes")
        start = to_utc(start)
        return cls(start, start + timedelta(minutes=minutes))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def shifted(self, delta: timedelta) -> "TimeRange":
        return TimeRange(self.start + delta, self.end + delta)


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    # No validation here: called in tight loops over stored meetings.
    return a.start < b.end and b.start < a.end


def ensure_valid(time_range: TimeRange) -> TimeRange:
    if time_range.end <= time_range.start:
        raise InvalidInputError("end must be after start")
    return time_range


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
