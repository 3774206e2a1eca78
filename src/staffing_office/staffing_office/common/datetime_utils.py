from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()


def ranges_overlap(start1: date, end1: Optional[date], start2: date, end2: Optional[date]) -> bool:
    """Inclusive calendar-range overlap. ``None`` as an end means open-ended."""
    if end2 is not None and start1 > end2:
        return False
    if end1 is not None and start2 > end1:
        return False
    return True


def overlap_days(start1: date, end1: date, start2: date, end2: Optional[date]) -> int:
    """Number of calendar days shared by two inclusive ranges (0 if disjoint)."""
    lo = max(start1, start2)
    hi = end1 if end2 is None else min(end1, end2)
    if lo > hi:
        return 0
    return (hi - lo).days + 1
