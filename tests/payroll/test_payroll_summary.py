from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.staffing_office.staffing_office.attendance.model import SkippedRecord
from src.staffing_office.staffing_office.core.enums import SkipReason
from src.staffing_office.staffing_office.payroll.summary import build_info, format_number


def test_format_number_drops_trailing_zeros():
    assert format_number(Decimal("12.50")) == "12.5"
    assert format_number(Decimal("10.00")) == "10"
    assert format_number(Decimal("500")) == "500"
    assert format_number(Decimal("0.125")) == "0.13"


def test_info_lists_rate_buckets_and_skip_reasons():
    skipped = [
        SkippedRecord(1, date(2024, 1, 1), SkipReason.MISSING_ATTENDANCE_DATA),
        SkippedRecord(2, date(2024, 1, 2), SkipReason.INVALID_OR_ZERO_WORKED_HOURS),
        SkippedRecord(3, date(2024, 1, 3), SkipReason.MISSING_ATTENDANCE_DATA),
    ]

    info = build_info(
        Decimal("12.5"),
        {Decimal("500"): Decimal("10"), Decimal("600"): Decimal("2.5")},
        skipped,
    )

    assert info == "12.5 days [10 days (500/day), 2.5 days (600/day)] | SKIPPED: 3 records (2 missing data, 1 invalid hours)"


def test_info_without_days_or_skips():
    assert build_info(Decimal(0), {}, []) == "0 days"


def test_info_for_shift_block_skips():
    skipped = [
        SkippedRecord(5, None, SkipReason.NOT_YET_STARTED),
        SkippedRecord(6, date(2024, 1, 3), SkipReason.IN_PROGRESS),
        SkippedRecord(7, date(2024, 1, 3), SkipReason.NO_VALID_ASSIGNMENT),
    ]

    assert build_info(Decimal(0), {}, skipped) == (
        "0 days | SKIPPED: 3 records (1 no assignment, 1 not started, 1 in progress)"
    )
