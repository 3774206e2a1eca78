"""Attendance aggregation for one worker and one pay period.

Each assignment is tracked in exactly one mode:

- daily: one clock-in/clock-out row per day; a day pays
  ``min(worked, standard) * rate / standard`` where ``standard`` is the
  length of the assignment's shift window
- shift block: one continuous block with a precomputed day count; pays
  ``days * rate`` and counts 24 hours per day

Unusable rows are returned as :class:`SkippedRecord` with a reason.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import ranges_overlap
from ..core.constants import HOURS_PER_DAY
from ..core.enums import AttendanceMode, SkipReason
from ..scheduling.model import Assignment
from .model import AttendanceRecord, SkippedRecord, shift_block_days
from .repository import AttendanceRepository

logger = structlog.get_logger(__name__)

_WORKED_RE = re.compile(r"^(\d+)(?::(\d{1,2}))?(?::(\d{1,2}))?$")
_DECIMAL_HOURS_RE = re.compile(r"^\d+\.\d+$")
ZERO = Decimal(0)


def parse_worked_hours(value: Optional[str]) -> Optional[Decimal]:
    """``"HH[:MM[:SS]]"`` or decimal hours (``"8.5"``) to hours; ``None`` when unparseable."""
    if value is None:
        return None
    text = str(value).strip()
    if _DECIMAL_HOURS_RE.match(text):
        return Decimal(text)
    m = _WORKED_RE.match(text)
    if not m:
        return None
    hours, minutes, seconds = int(m.group(1)), int(m.group(2) or 0), int(m.group(3) or 0)
    if minutes > 59 or seconds > 59:
        return None
    return Decimal(hours) + Decimal(minutes) / Decimal(60) + Decimal(seconds) / Decimal(3600)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class AttendanceSummary:
    billable_hours: Decimal = ZERO
    actual_hours: Decimal = ZERO
    days_worked: Decimal = ZERO
    gross_pay: Decimal = ZERO
    skipped: tuple[SkippedRecord, ...] = ()
    rate_buckets: dict = field(default_factory=dict)
    records_seen: int = 0


@dataclass
class _Totals:
    billable: Decimal = ZERO
    actual: Decimal = ZERO
    days: Decimal = ZERO
    gross: Decimal = ZERO
    records_seen: int = 0
    skipped: list = field(default_factory=list)
    buckets: dict = field(default_factory=dict)

    def add_days(self, rate: Decimal, days: Decimal) -> None:
        self.days += days
        self.buckets[rate] = self.buckets.get(rate, ZERO) + days

    def skip(self, record_id: int, day: Optional[date], reason: SkipReason) -> None:
        self.skipped.append(SkippedRecord(record_id=record_id, date=day, reason=reason))


class AttendanceAggregator:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def aggregate(self, assignments: Sequence[Assignment], *, start: date, end: date) -> AttendanceSummary:
        totals = _Totals()

        daily = [a for a in assignments if a.attendance_mode == AttendanceMode.DAILY]
        blocks = [a for a in assignments if a.attendance_mode == AttendanceMode.SHIFT_BLOCK]

        if daily:
            self._aggregate_daily(daily, start, end, totals)
        for a in blocks:
            self._aggregate_block(a, start, end, totals)

        return AttendanceSummary(
            billable_hours=totals.billable,
            actual_hours=totals.actual,
            days_worked=totals.days,
            gross_pay=totals.gross,
            skipped=tuple(totals.skipped),
            rate_buckets=dict(totals.buckets),
            records_seen=totals.records_seen,
        )

    def _aggregate_daily(self, assignments: Sequence[Assignment], start: date, end: date, totals: _Totals) -> None:
        payable: dict[int, tuple[Decimal, Decimal]] = {}
        for a in assignments:
            if a.shift is None or not a.pay_rate_per_day or a.pay_rate_per_day <= 0:
                logger.info("assignment_not_payable", assignment_id=a.assignment_id, reason="missing shift or pay rate")
                continue
            standard = a.shift.duration_hours
            if standard <= 0:
                logger.info("assignment_not_payable", assignment_id=a.assignment_id, reason="zero shift hours")
                continue
            payable[a.assignment_id] = (a.pay_rate_per_day, standard)

        records = self._attendance.list_for_assignments(
            assignment_ids=[a.assignment_id for a in assignments],
            start_date=start,
            end_date=end,
        )

        for r in sorted(records, key=lambda x: (x.work_date, x.attendance_id)):
            totals.records_seen += 1
            self._apply_record(r, payable, totals)

    @staticmethod
    def _apply_record(r: AttendanceRecord, payable: dict, totals: _Totals) -> None:
        terms = payable.get(r.assignment_id)
        if terms is None:
            totals.skip(r.attendance_id, r.work_date, SkipReason.NO_VALID_ASSIGNMENT)
            return

        if _blank(r.clock_in) or _blank(r.clock_out) or _blank(r.total_worked):
            totals.skip(r.attendance_id, r.work_date, SkipReason.MISSING_ATTENDANCE_DATA)
            return

        worked = parse_worked_hours(r.total_worked)
        if worked is None or worked <= 0:
            totals.skip(r.attendance_id, r.work_date, SkipReason.INVALID_OR_ZERO_WORKED_HOURS)
            return

        rate, standard = terms
        billable = min(worked, standard)
        hourly = rate / standard

        totals.gross += billable * hourly
        totals.billable += billable
        totals.actual += worked
        totals.add_days(rate, Decimal(1))

    @staticmethod
    def _aggregate_block(a: Assignment, start: date, end: date, totals: _Totals) -> None:
        if a.shift_start_at is None:
            totals.skip(a.assignment_id, None, SkipReason.NOT_YET_STARTED)
            return
        if a.shift_end_at is None:
            totals.skip(a.assignment_id, a.shift_start_at.date(), SkipReason.IN_PROGRESS)
            return
        if not ranges_overlap(a.shift_start_at.date(), a.shift_end_at.date(), start, end):
            return
        if not a.pay_rate_per_day or a.pay_rate_per_day <= 0:
            totals.skip(a.assignment_id, a.shift_start_at.date(), SkipReason.NO_VALID_ASSIGNMENT)
            return

        days = a.calculated_attendance_days
        if days is None:
            days = shift_block_days(a.shift_start_at, a.shift_end_at)

        hours = days * HOURS_PER_DAY
        totals.gross += days * a.pay_rate_per_day
        totals.billable += hours
        totals.actual += hours
        totals.add_days(a.pay_rate_per_day, days)
