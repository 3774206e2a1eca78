from __future__ import annotations

from decimal import Decimal

import pytest

from src.staffing_office.staffing_office.core.exceptions import InvalidTimeFormat
from src.staffing_office.staffing_office.shifts.interval import TimeInterval, overlaps, parse_time_of_day


def iv(start: str, end: str) -> TimeInterval:
    return TimeInterval.from_strings(start, end)


SAMPLES = [
    iv("08:00", "16:00"),
    iv("16:00", "23:59"),
    iv("22:00", "06:00"),
    iv("23:30", "00:30"),
    iv("00:00", "00:00"),
    iv("05:00", "05:30"),
    iv("12:00:30", "12:00:45"),
]


@pytest.mark.parametrize("a", SAMPLES)
@pytest.mark.parametrize("b", SAMPLES)
def test_overlap_is_symmetric(a, b):
    assert overlaps(a, b) == overlaps(b, a)


@pytest.mark.parametrize("other", SAMPLES)
def test_full_day_overlaps_every_non_empty_interval(other):
    assert overlaps(TimeInterval.full_day(), other)


def test_overnight_shift_wraps_past_midnight():
    night = iv("22:00", "06:00")
    assert night.wraps_midnight
    assert overlaps(night, iv("05:00", "05:30"))
    assert not overlaps(night, iv("06:00", "07:00"))
    assert overlaps(night, iv("21:00", "22:30"))


def test_intervals_across_midnight_overlap():
    assert overlaps(iv("23:30", "00:30"), iv("00:00", "01:00"))


def test_touching_intervals_do_not_overlap():
    assert not overlaps(iv("08:00", "16:00"), iv("16:00", "23:59"))
    assert overlaps(iv("08:00", "16:00"), iv("15:00", "23:59"))


def test_midnight_to_midnight_is_a_full_day():
    shift = iv("00:00", "00:00:00")
    assert shift.is_full_day
    assert not shift.wraps_midnight
    assert shift.duration_hours == Decimal(24)


def test_durations():
    assert iv("09:00", "17:00").duration_hours == Decimal(8)
    assert iv("22:00", "06:00").duration_hours == Decimal(8)
    assert iv("23:30", "00:30").duration_seconds == 3600


def test_segments_drop_empty_pieces():
    assert iv("22:00", "00:00").segments() == ((22 * 3600, 86400),)


@pytest.mark.parametrize("value", ["8:00", "24:00", "12:60", "12:00:60", "noon", "", "12:00:00:00"])
def test_parse_time_of_day_rejects_bad_values(value):
    with pytest.raises(InvalidTimeFormat):
        parse_time_of_day(value)


def test_parse_time_of_day_accepts_seconds():
    assert parse_time_of_day("01:02:03") == 3723
    assert parse_time_of_day("23:59") == 86340
