from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import MIN_SHIFT_BLOCK_DAYS, MONEY_QUANT
from ..core.enums import SkipReason


@dataclass(frozen=True)
class AttendanceRecord:
    """Daily clock-in/clock-out row for one assignment.

    Values are kept as stored (strings, possibly blank); the aggregator decides
    whether the row is usable.
    """

    attendance_id: int
    assignment_id: int
    work_date: date
    clock_in: Optional[str]
    clock_out: Optional[str]
    total_worked: Optional[str]


@dataclass(frozen=True)
class SkippedRecord:
    record_id: int
    date: Optional[date]
    reason: SkipReason

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "date": self.date.isoformat() if self.date else None,
            "reason": self.reason.value,
        }


def shift_block_days(start_at: datetime, end_at: datetime) -> Decimal:
    """Attendance days covered by one continuous block (2 decimals, at least 0.01)."""
    hours = Decimal(str((end_at - start_at).total_seconds())) / Decimal(3600)
    days = (hours / Decimal(24)).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
    return max(MIN_SHIFT_BLOCK_DAYS, days)
