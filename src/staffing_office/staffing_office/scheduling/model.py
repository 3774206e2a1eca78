from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AssignmentStatus, AttendanceMode
from ..shifts.interval import TimeInterval


@dataclass(frozen=True)
class ProposedAssignment:
    """One row of a scheduling batch as the caller sends it (raw values)."""

    worker_id: object
    start_date: object
    end_date: object
    shift_start: object
    shift_end: object
    pay_rate_per_day: object


@dataclass(frozen=True)
class ShiftRequest:
    """A validated :class:`ProposedAssignment`."""

    index: int
    worker_id: int
    client_id: str
    start_date: date
    end_date: date
    shift: TimeInterval
    pay_rate_per_day: Decimal


@dataclass(frozen=True)
class Assignment:
    """Persisted worker-to-client assignment."""

    assignment_id: int
    worker_id: int
    client_id: str
    start_date: date
    end_date: Optional[date]
    shift: Optional[TimeInterval]
    pay_rate_per_day: Optional[Decimal]
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    attendance_mode: AttendanceMode = AttendanceMode.DAILY
    shift_start_at: Optional[datetime] = None
    shift_end_at: Optional[datetime] = None
    calculated_attendance_days: Optional[Decimal] = None

