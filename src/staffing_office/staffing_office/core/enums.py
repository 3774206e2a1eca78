from __future__ import annotations

from enum import Enum


class AssignmentStatus(str, Enum):
    """Lifecycle of a worker-to-client assignment."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AttendanceMode(str, Enum):
    """How attendance is recorded for one assignment (never mixed)."""

    DAILY = "daily"
    SHIFT_BLOCK = "shift_block"


class WorkerStatus(str, Enum):
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class ShiftKind(str, Enum):
    SAME_DAY = "same_day"
    OVERNIGHT = "overnight"
    FULL_DAY = "full_day"


class SkipReason(str, Enum):
    """Why an attendance record could not be paid."""

    MISSING_ATTENDANCE_DATA = "MissingAttendanceData"
    INVALID_OR_ZERO_WORKED_HOURS = "InvalidOrZeroWorkedHours"
    NO_VALID_ASSIGNMENT = "NoValidAssignment"
    NOT_YET_STARTED = "NotYetStarted"
    IN_PROGRESS = "InProgress"
