from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import WorkerStatus
from .model import Assignment, ShiftRequest


class WorkerRepository(Protocol):
    def find_existing_ids(self, worker_ids: Sequence[int]) -> set[int]:
        raise NotImplementedError

    def set_status(self, worker_id: int, status: WorkerStatus) -> None:
        """Raise on failure; callers collect the outcome."""

        raise NotImplementedError


class ClientRepository(Protocol):
    def exists(self, client_id: str) -> bool:
        raise NotImplementedError


class AssignmentRepository(Protocol):
    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def list_in_window(self, *, worker_ids: Sequence[int], start: date, end: date) -> Sequence[Assignment]:
        """Assignments of ``worker_ids`` whose date range touches ``[start, end]``."""

        raise NotImplementedError

    def list_for_worker(self, worker_id: int) -> Sequence[Assignment]:
        raise NotImplementedError

    def list_worker_ids_in_window(self, *, start: date, end: date) -> Sequence[int]:
        raise NotImplementedError

    def insert_batch(self, requests: Sequence[ShiftRequest]) -> Sequence[Assignment]:
        """Insert every request in one transaction; all rows or none."""

        raise NotImplementedError

    def update(self, assignment_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, assignment_id: int) -> bool:
        raise NotImplementedError

    def count_for_worker(self, worker_id: int) -> int:
        raise NotImplementedError
