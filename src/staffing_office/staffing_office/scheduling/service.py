from __future__ import annotations

import dataclasses
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence

import structlog

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import require_positive_decimal
from ..core.constants import DEFAULT_STATUS_UPDATE_WORKERS
from ..core.enums import AssignmentStatus, WorkerStatus
from ..core.exceptions import ConflictError, DomainError, ReferentialError, ValidationError
from ..shifts.interval import clock_strings
from ..shifts.validator import ShiftValidator
from .conflicts import ConflictScheduler
from .model import Assignment, ProposedAssignment
from .repository import AssignmentRepository, ClientRepository, WorkerRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"start_date", "end_date", "shift_start", "shift_end", "pay_rate_per_day"})


@dataclass(frozen=True)
class PartialFailureWarning:
    """The primary write is durable but a follow-up step failed."""

    message: str
    worker_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ScheduleResult:
    success: bool
    message: str
    error_type: Optional[str] = None
    conflicts: tuple[str, ...] = ()
    missing_ids: tuple = ()
    assignment_ids: tuple[int, ...] = ()
    warnings: tuple[PartialFailureWarning, ...] = ()


@dataclass(frozen=True)
class OperationResult:
    success: bool
    message: str
    error_type: Optional[str] = None
    assignment_id: Optional[int] = None
    conflicts: tuple[str, ...] = ()
    warnings: tuple[PartialFailureWarning, ...] = ()


def _failure(result_cls, e: DomainError, **extra):
    return result_cls(
        success=False,
        message=str(e),
        error_type=e.error_type,
        conflicts=tuple(getattr(e, "conflicts", ())),
        **extra,
    )


class SchedulingService:
    """Use cases around worker-to-client assignments.

    Every public method returns a structured result; domain errors and storage
    failures are converted here and never escape to the caller.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        workers: WorkerRepository,
        clients: ClientRepository,
        attendance: AttendanceRepository,
        *,
        scheduler: Optional[ConflictScheduler] = None,
        validator: Optional[ShiftValidator] = None,
        status_update_workers: int = DEFAULT_STATUS_UPDATE_WORKERS,
        clock: Callable[[], date] = today_local,
    ):
        self._assignments = assignments
        self._workers = workers
        self._clients = clients
        self._attendance = attendance
        self._validator = validator or ShiftValidator()
        self._scheduler = scheduler or ConflictScheduler(self._validator)
        self._status_update_workers = max(1, int(status_update_workers))
        self._clock = clock

    # ------------------------------------------------------------------
    # schedule

    def schedule_shifts(self, proposed: Sequence[ProposedAssignment], client_id: str) -> ScheduleResult:
        try:
            return self._schedule(proposed, client_id)
        except ReferentialError as e:
            logger.warning("shift_schedule_rejected", error_type=e.error_type, missing_ids=e.missing_ids)
            return _failure(ScheduleResult, e, missing_ids=tuple(e.missing_ids))
        except DomainError as e:
            logger.warning("shift_schedule_rejected", error_type=e.error_type, error=str(e))
            return _failure(ScheduleResult, e)
        except Exception as e:
            logger.exception("shift_schedule_failed", client_id=client_id)
            return ScheduleResult(
                success=False,
                message=f"Unexpected error during database operations: {e}",
                error_type="InternalError",
            )

    def _schedule(self, proposed: Sequence[ProposedAssignment], client_id: str) -> ScheduleResult:
        requests = self._scheduler.prepare(proposed, client_id)
        client_id = requests[0].client_id
        worker_ids = sorted({r.worker_id for r in requests})

        self._check_references(client_id, worker_ids)

        window_start = min(r.start_date for r in requests)
        window_end = max(r.end_date for r in requests)
        existing = self._assignments.list_in_window(worker_ids=worker_ids, start=window_start, end=window_end)

        decision = self._scheduler.check(requests, existing)
        if not decision.accepted:
            raise ConflictError(
                f"Scheduling conflicts detected: {', '.join(decision.conflicts)}",
                conflicts=decision.conflicts,
            )

        inserted = self._assignments.insert_batch(requests)
        if len(inserted) != len(requests):
            logger.warning("shift_insert_count_mismatch", expected=len(requests), inserted=len(inserted))
            return ScheduleResult(
                success=False,
                message="Not all shifts were inserted successfully",
                error_type="InsertError",
            )

        assignment_ids = tuple(a.assignment_id for a in inserted)
        logger.info("shifts_inserted", client_id=client_id, count=len(inserted), assignment_ids=list(assignment_ids))

        failed = self._set_worker_statuses(worker_ids, WorkerStatus.ASSIGNED)
        if failed:
            ids = ", ".join(str(w) for w in failed)
            warning = PartialFailureWarning(
                message=f"{len(failed)} worker status updates failed for workers: {ids}",
                worker_ids=tuple(failed),
            )
            return ScheduleResult(
                success=True,
                message=f"Shifts scheduled successfully, but {warning.message}",
                assignment_ids=assignment_ids,
                warnings=(warning,),
            )

        return ScheduleResult(
            success=True,
            message="Shifts scheduled successfully and all worker statuses updated",
            assignment_ids=assignment_ids,
        )

    def _check_references(self, client_id: str, worker_ids: Sequence[int]) -> None:
        # Both lookups are read-only and independent.
        with ThreadPoolExecutor(max_workers=2) as pool:
            client_future = pool.submit(self._clients.exists, client_id)
            workers_future = pool.submit(self._workers.find_existing_ids, list(worker_ids))
            client_exists = client_future.result()
            found = set(workers_future.result())

        problems: list[str] = []
        missing: list[object] = []
        if not client_exists:
            problems.append(f"Client with ID {client_id} does not exist")
            missing.append(client_id)

        missing_workers = [w for w in worker_ids if w not in found]
        if missing_workers:
            problems.append(f"The following worker IDs do not exist: {', '.join(str(w) for w in missing_workers)}")
            missing.extend(missing_workers)

        if problems:
            raise ReferentialError("; ".join(problems), missing_ids=missing)

    def _set_worker_statuses(self, worker_ids: Sequence[int], status: WorkerStatus) -> list[int]:
        """Fan out status updates and collect every outcome. Returns failed ids."""
        failed: list[int] = []
        workers = min(len(worker_ids), self._status_update_workers) or 1
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(self._workers.set_status, w, status): w for w in worker_ids}
            for future in as_completed(futures):
                worker_id = futures[future]
                try:
                    future.result()
                except Exception as e:
                    logger.warning("worker_status_update_failed", worker_id=worker_id, status=status.value, error=str(e))
                    failed.append(worker_id)
        return sorted(failed)

    # ------------------------------------------------------------------
    # update / end / delete

    def update_assignment(self, assignment_id: int, fields: Mapping[str, Any]) -> OperationResult:
        try:
            return self._update(int(assignment_id), fields)
        except DomainError as e:
            logger.warning("assignment_update_rejected", assignment_id=assignment_id, error=str(e))
            return _failure(OperationResult, e, assignment_id=assignment_id)
        except Exception as e:
            logger.exception("assignment_update_failed", assignment_id=assignment_id)
            return OperationResult(success=False, message=f"Failed to update assignment: {e}", error_type="InternalError")

    def _update(self, assignment_id: int, fields: Mapping[str, Any]) -> OperationResult:
        if not fields:
            raise ValidationError("No fields to update")
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unsupported field(s): {', '.join(unknown)}")

        current = self._require_active(assignment_id)
        changes: dict[str, Any] = {}

        if "start_date" in fields and (fields["start_date"] is None or not str(fields["start_date"]).strip()):
            raise ValidationError("Start date cannot be blank")
        try:
            start = parse_iso_date(fields["start_date"]) if "start_date" in fields else current.start_date
            if "end_date" in fields:
                end = parse_iso_date(fields["end_date"]) if fields["end_date"] else None
            else:
                end = current.end_date
        except (AttributeError, TypeError, ValueError):
            raise ValidationError("Invalid date format")
        if end is not None and end < start:
            raise ValidationError("End date cannot be before start date")
        if start != current.start_date:
            changes["start_date"] = start
        if end != current.end_date:
            changes["end_date"] = end

        shift = current.shift
        if "shift_start" in fields or "shift_end" in fields:
            cur_start, cur_end = clock_strings(current.shift)
            shift = self._validator.require(fields.get("shift_start", cur_start), fields.get("shift_end", cur_end))
            if shift != current.shift:
                changes["shift"] = shift

        if "pay_rate_per_day" in fields:
            rate = require_positive_decimal(fields["pay_rate_per_day"], "Pay rate per day")
            if rate != current.pay_rate_per_day:
                changes["pay_rate_per_day"] = rate

        if not changes:
            return OperationResult(success=True, message="Assignment unchanged", assignment_id=assignment_id)

        updated = dataclasses.replace(current, start_date=start, end_date=end, shift=shift)
        if {"start_date", "end_date", "shift"} & set(changes):
            others = self._assignments.list_for_worker(current.worker_id)
            conflicts = self._scheduler.conflicts_for_update(updated, others)
            if conflicts:
                raise ConflictError(f"Scheduling conflicts detected: {', '.join(conflicts)}", conflicts=conflicts)

        if not self._assignments.update(assignment_id, changes):
            raise ValidationError(f"Assignment {assignment_id} could not be updated")

        logger.info("assignment_updated", assignment_id=assignment_id, fields=sorted(changes))
        return OperationResult(success=True, message="Assignment updated successfully", assignment_id=assignment_id)

    def end_assignment(self, assignment_id: int, end_date: Optional[date] = None) -> OperationResult:
        try:
            current = self._require_active(int(assignment_id))
            end = end_date or self._clock()
            if end < current.start_date:
                raise ValidationError("End date cannot be before start date")
            if not self._assignments.update(current.assignment_id, {"status": AssignmentStatus.COMPLETED, "end_date": end}):
                raise ValidationError(f"Assignment {assignment_id} could not be updated")
        except DomainError as e:
            logger.warning("assignment_end_rejected", assignment_id=assignment_id, error=str(e))
            return _failure(OperationResult, e, assignment_id=assignment_id)
        except Exception as e:
            logger.exception("assignment_end_failed", assignment_id=assignment_id)
            return OperationResult(success=False, message=f"Failed to end assignment: {e}", error_type="InternalError")

        logger.info("assignment_completed", assignment_id=assignment_id, end_date=end.isoformat())
        return OperationResult(success=True, message="Assignment ended successfully", assignment_id=assignment_id)

    def delete_assignment(self, assignment_id: int) -> OperationResult:
        try:
            current = self._require_active(int(assignment_id))

            dependents = self._attendance.count_for_assignment(current.assignment_id)
            if current.shift_start_at is not None:
                dependents += 1
            if dependents:
                raise ValidationError(
                    f"Assignment {assignment_id} has {dependents} attendance record(s) and cannot be deleted"
                )

            if not self._assignments.delete(current.assignment_id):
                raise ValidationError(f"Assignment {assignment_id} could not be deleted")
        except DomainError as e:
            logger.warning("assignment_delete_rejected", assignment_id=assignment_id, error=str(e))
            return _failure(OperationResult, e, assignment_id=assignment_id)
        except Exception as e:
            logger.exception("assignment_delete_failed", assignment_id=assignment_id)
            return OperationResult(success=False, message=f"Failed to delete assignment: {e}", error_type="InternalError")

        logger.info("assignment_deleted", assignment_id=assignment_id, worker_id=current.worker_id)
        warnings = self._release_worker_if_idle(current.worker_id)
        return OperationResult(
            success=True,
            message="Assignment deleted successfully",
            assignment_id=current.assignment_id,
            warnings=warnings,
        )

    def _release_worker_if_idle(self, worker_id: int) -> tuple[PartialFailureWarning, ...]:
        try:
            if self._assignments.count_for_worker(worker_id) == 0:
                self._workers.set_status(worker_id, WorkerStatus.UNASSIGNED)
        except Exception as e:
            logger.warning("worker_status_update_failed", worker_id=worker_id, status=WorkerStatus.UNASSIGNED.value, error=str(e))
            return (
                PartialFailureWarning(
                    message=f"Failed to update worker {worker_id} status to unassigned",
                    worker_ids=(worker_id,),
                ),
            )
        return ()

    def _require_active(self, assignment_id: int) -> Assignment:
        current = self._assignments.get_by_id(assignment_id)
        if current is None:
            raise ReferentialError(f"Assignment {assignment_id} not found", missing_ids=[assignment_id])
        if current.status != AssignmentStatus.ACTIVE:
            raise ValidationError(f"Assignment {assignment_id} is {current.status.value}; only active assignments can be changed")
        return current
