"""Shift conflict detection.

Two assignments of the same worker conflict when their calendar ranges
intersect (inclusive) AND their clock intervals overlap. Checked against
persisted assignments and between every pair inside a new batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, ranges_overlap
from ..common.validators import require_non_empty, require_positive_decimal, require_positive_int
from ..core.enums import AssignmentStatus
from ..core.exceptions import ValidationError
from ..shifts.interval import TimeInterval
from ..shifts.validator import ShiftValidator
from .model import Assignment, ProposedAssignment, ShiftRequest


@dataclass(frozen=True)
class ScheduleDecision:
    accepted: bool
    conflicts: tuple[str, ...] = ()


def _occupies(a_start: date, a_end: Optional[date], a_shift: Optional[TimeInterval],
              b_start: date, b_end: Optional[date], b_shift: Optional[TimeInterval]) -> bool:
    if not ranges_overlap(a_start, a_end, b_start, b_end):
        return False
    # A persisted row without a shift window blocks the whole day.
    a_shift = a_shift or TimeInterval.full_day()
    b_shift = b_shift or TimeInterval.full_day()
    return a_shift.overlaps(b_shift)


def _dedupe(items: Sequence[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


class ConflictScheduler:
    def __init__(self, validator: Optional[ShiftValidator] = None):
        self._validator = validator or ShiftValidator()

    def prepare(self, proposed: Sequence[ProposedAssignment], client_id: str) -> list[ShiftRequest]:
        """Validate a raw batch; the first bad row rejects the whole batch."""
        if not proposed:
            raise ValidationError("No shift data provided")
        client_id = require_non_empty(client_id, "Client ID")

        requests: list[ShiftRequest] = []
        for i, p in enumerate(proposed):
            if any(
                v is None or (isinstance(v, str) and not v.strip())
                for v in (p.worker_id, p.start_date, p.end_date, p.shift_start, p.shift_end, p.pay_rate_per_day)
            ):
                raise ValidationError(f"Incomplete shift data at index {i}")

            worker_id = require_positive_int(p.worker_id, f"Worker ID at shift {i}")

            try:
                start = parse_iso_date(p.start_date)
                end = parse_iso_date(p.end_date)
            except (AttributeError, TypeError, ValueError):
                raise ValidationError(f"Invalid date format at shift {i}")
            if end < start:
                raise ValidationError(f"End date cannot be before start date at shift {i}")

            try:
                shift = self._validator.require(p.shift_start, p.shift_end)
            except ValidationError as e:
                raise type(e)(f"Invalid shift times at shift {i}: {e}")

            rate = require_positive_decimal(p.pay_rate_per_day, f"Pay rate per day at shift {i}")

            requests.append(
                ShiftRequest(
                    index=i,
                    worker_id=worker_id,
                    client_id=client_id,
                    start_date=start,
                    end_date=end,
                    shift=shift,
                    pay_rate_per_day=rate,
                )
            )
        return requests

    def check(self, requests: Sequence[ShiftRequest], existing: Sequence[Assignment]) -> ScheduleDecision:
        conflicts: list[str] = []

        by_worker: dict[int, list[Assignment]] = {}
        for e in existing:
            if e.status == AssignmentStatus.CANCELLED:
                continue
            by_worker.setdefault(e.worker_id, []).append(e)

        for pos, req in enumerate(requests):
            for e in by_worker.get(req.worker_id, []):
                if _occupies(req.start_date, req.end_date, req.shift, e.start_date, e.end_date, e.shift):
                    conflicts.append(
                        f"Worker {req.worker_id} has conflicting shifts (date and time overlap) "
                        f"with assignment {e.assignment_id} at shift index {req.index}"
                    )

            for other in requests[pos + 1:]:
                if other.worker_id != req.worker_id:
                    continue
                if _occupies(req.start_date, req.end_date, req.shift, other.start_date, other.end_date, other.shift):
                    conflicts.append(
                        f"Worker {req.worker_id} has conflicting shifts within the new schedule "
                        f"(shifts {req.index} and {other.index})"
                    )

        if conflicts:
            return ScheduleDecision(accepted=False, conflicts=_dedupe(conflicts))
        return ScheduleDecision(accepted=True)

    def schedule(
        self,
        proposed: Sequence[ProposedAssignment],
        existing: Sequence[Assignment],
        *,
        client_id: str,
    ) -> ScheduleDecision:
        return self.check(self.prepare(proposed, client_id), existing)

    def conflicts_for_update(self, updated: Assignment, others: Sequence[Assignment]) -> tuple[str, ...]:
        """Conflicts an edited assignment would have with the worker's other rows."""
        found = [
            f"Worker {updated.worker_id} has conflicting shifts (date and time overlap) with assignment {o.assignment_id}"
            for o in others
            if o.assignment_id != updated.assignment_id
            and o.worker_id == updated.worker_id
            and o.status != AssignmentStatus.CANCELLED
            and _occupies(updated.start_date, updated.end_date, updated.shift, o.start_date, o.end_date, o.shift)
        ]
        return _dedupe(found)
