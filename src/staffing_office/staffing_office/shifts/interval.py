"""Wall-clock intervals on a 24 hour clock.

A :class:`TimeInterval` is half-open ``[start, end)`` in seconds of the day.
``end <= start`` means the interval wraps past midnight; ``(0, 86400)`` is the
canonical full-day shift.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Optional, Tuple, Union

from ..core.constants import SECONDS_PER_DAY
from ..core.exceptions import InvalidTimeFormat

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")

Segment = Tuple[int, int]


def parse_time_of_day(value: Union[str, time]) -> int:
    """Parse ``HH:MM`` / ``HH:MM:SS`` (or a ``datetime.time``) into seconds of day."""
    if isinstance(value, time):
        return value.hour * 3600 + value.minute * 60 + value.second

    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Invalid time format: {value!r}")

    m = _TIME_RE.match(value.strip())
    if not m:
        raise InvalidTimeFormat(f"Shift times must be in HH:MM or HH:MM:SS format, got: {value!r}")

    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeFormat(f"Invalid time values: {value!r}")
    return hour * 3600 + minute * 60 + second


def format_time_of_day(seconds: int) -> str:
    if seconds == SECONDS_PER_DAY:
        return "24:00:00"
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


@dataclass(frozen=True)
class TimeInterval:
    start_seconds: int
    end_seconds: int

    def __post_init__(self):
        if not 0 <= self.start_seconds < SECONDS_PER_DAY:
            raise ValueError(f"start_seconds out of range: {self.start_seconds}")
        if not 0 <= self.end_seconds <= SECONDS_PER_DAY:
            raise ValueError(f"end_seconds out of range: {self.end_seconds}")

    @classmethod
    def full_day(cls) -> "TimeInterval":
        return cls(0, SECONDS_PER_DAY)

    @classmethod
    def from_strings(cls, start: Union[str, time], end: Union[str, time]) -> "TimeInterval":
        """Build an interval from two clock strings.

        ``00:00`` to ``00:00`` is read as the full day, not as zero length.
        """
        start_s = parse_time_of_day(start)
        end_s = parse_time_of_day(end)
        if start_s == 0 and end_s == 0:
            return cls.full_day()
        return cls(start_s, end_s)

    @property
    def is_full_day(self) -> bool:
        return self.start_seconds == 0 and self.end_seconds == SECONDS_PER_DAY

    @property
    def wraps_midnight(self) -> bool:
        return not self.is_full_day and self.end_seconds <= self.start_seconds

    @property
    def duration_seconds(self) -> int:
        if self.is_full_day:
            return SECONDS_PER_DAY
        if self.wraps_midnight:
            return SECONDS_PER_DAY - self.start_seconds + self.end_seconds
        return self.end_seconds - self.start_seconds

    @property
    def duration_hours(self) -> Decimal:
        return Decimal(self.duration_seconds) / Decimal(3600)

    def segments(self) -> Tuple[Segment, ...]:
        """Non-empty, non-wrapping pieces of this interval."""
        if not self.wraps_midnight:
            return ((self.start_seconds, self.end_seconds),)
        pieces = ((self.start_seconds, SECONDS_PER_DAY), (0, self.end_seconds))
        return tuple(p for p in pieces if p[0] < p[1])

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """True if the two clock intervals share any second of the day."""
    for a_start, a_end in a.segments():
        for b_start, b_end in b.segments():
            if a_start < b_end and b_start < a_end:
                return True
    return False


def clock_strings(shift: Optional[TimeInterval]) -> Tuple[Optional[str], Optional[str]]:
    """Storage form ``("HH:MM:SS", "HH:MM:SS")``; the full day goes back to midnight-midnight."""
    if shift is None:
        return None, None
    if shift.is_full_day:
        return "00:00:00", "00:00:00"
    return format_time_of_day(shift.start_seconds), format_time_of_day(shift.end_seconds)
