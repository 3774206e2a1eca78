from __future__ import annotations

import pytest

from src.staffing_office.staffing_office.core.enums import ShiftKind
from src.staffing_office.staffing_office.core.exceptions import InvalidTimeFormat, InvalidTimeRange
from src.staffing_office.staffing_office.shifts.interval import TimeInterval
from src.staffing_office.staffing_office.shifts.validator import ShiftValidator


@pytest.mark.parametrize(
    "start,end,kind",
    [
        ("08:00", "16:00", ShiftKind.SAME_DAY),
        ("22:00", "06:00", ShiftKind.OVERNIGHT),
        ("23:30:00", "00:30:00", ShiftKind.OVERNIGHT),
        ("00:00", "00:00", ShiftKind.FULL_DAY),
    ],
)
def test_classifies_shift_kinds(start, end, kind):
    result = ShiftValidator().validate(start, end)
    assert result.ok
    assert result.kind == kind


def test_full_day_validates_to_canonical_interval():
    assert ShiftValidator().require("00:00", "00:00") == TimeInterval.full_day()


def test_zero_length_shift_other_than_midnight_is_rejected():
    result = ShiftValidator().validate("09:00", "09:00")
    assert not result.ok
    assert result.error_type == "InvalidTimeRange"
    assert "overnight or 24-hour" in result.error

    with pytest.raises(InvalidTimeRange):
        ShiftValidator().require("09:00", "09:00")


@pytest.mark.parametrize("start,end", [(None, "10:00"), ("08:00", ""), ("8:00", "10:00"), ("08:00", "25:00")])
def test_bad_clock_values_are_format_errors(start, end):
    result = ShiftValidator().validate(start, end)
    assert not result.ok
    assert result.error_type == "InvalidTimeFormat"

    with pytest.raises(InvalidTimeFormat):
        ShiftValidator().require(start, end)
