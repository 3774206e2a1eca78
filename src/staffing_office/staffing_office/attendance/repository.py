from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_assignments(
        self,
        *,
        assignment_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_assignment(self, assignment_id: int) -> int:
        raise NotImplementedError
