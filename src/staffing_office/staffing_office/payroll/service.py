from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import structlog

from ..attendance.aggregator import AttendanceAggregator
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_int
from ..core.enums import PaymentStatus
from ..core.exceptions import ConflictError, DomainError, ValidationError
from ..scheduling.repository import AssignmentRepository
from ..scheduling.service import OperationResult
from .calculator.advance_calculator import AdvancePayrollCalculator
from .calculator.attendance_calculator import AttendancePayrollCalculator
from .model import AdvanceResult, PayCycleReport, PayrollResult
from .repository import PaymentRepository

logger = structlog.get_logger(__name__)


def _period(start, end) -> tuple[date, date]:
    try:
        return parse_iso_date(start), parse_iso_date(end)
    except (AttributeError, TypeError, ValueError):
        raise ValidationError("Invalid date format, expected YYYY-MM-DD")


class PayrollService:
    """Salary, advance salary and pay-cycle runs.

    Ad-hoc requests and the scheduled cycle go through the same calculator.
    """

    def __init__(
        self,
        assignments: AssignmentRepository,
        payments: PaymentRepository,
        aggregator: AttendanceAggregator,
        *,
        calculator: Optional[AttendancePayrollCalculator] = None,
        advance_calculator: Optional[AdvancePayrollCalculator] = None,
    ):
        self._assignments = assignments
        self._payments = payments
        self._calculator = calculator or AttendancePayrollCalculator(assignments, payments, aggregator)
        self._advance = advance_calculator or AdvancePayrollCalculator(assignments, payments)

    def calculate_salary(self, worker_id, start, end, existing_payment_id=None) -> PayrollResult:
        try:
            wid = require_positive_int(worker_id, "Worker ID")
            period_start, period_end = _period(start, end)
            pid = require_positive_int(existing_payment_id, "Payment ID") if existing_payment_id is not None else None
            return self._calculator.calculate(
                worker_id=wid, start=period_start, end=period_end, existing_payment_id=pid
            )
        except DomainError as e:
            logger.warning("payroll_rejected", worker_id=worker_id, error_type=e.error_type, error=str(e))
            return PayrollResult(
                success=False,
                worker_id=worker_id,
                error=str(e),
                error_type=e.error_type,
                overlapping_payments=tuple(getattr(e, "overlapping", ())),
            )
        except Exception as e:
            logger.exception("payroll_failed", worker_id=worker_id)
            return PayrollResult(
                success=False,
                worker_id=worker_id,
                error=f"Failed to calculate salary: {e}",
                error_type="InternalError",
            )

    def create_advance_salary(self, worker_id, start, end) -> AdvanceResult:
        try:
            wid = require_positive_int(worker_id, "Worker ID")
            period_start, period_end = _period(start, end)
            return self._advance.calculate(worker_id=wid, start=period_start, end=period_end)
        except DomainError as e:
            logger.warning("advance_salary_rejected", worker_id=worker_id, error_type=e.error_type, error=str(e))
            return AdvanceResult(
                success=False,
                worker_id=worker_id,
                error=str(e),
                error_type=e.error_type,
                overlapping_payments=tuple(getattr(e, "overlapping", ())),
            )
        except Exception as e:
            logger.exception("advance_salary_failed", worker_id=worker_id)
            return AdvanceResult(
                success=False,
                worker_id=worker_id,
                error=f"Failed to create advance salary: {e}",
                error_type="InternalError",
            )

    def run_pay_cycle(self, start, end, worker_ids: Optional[Sequence[int]] = None) -> PayCycleReport:
        """Calculate salaries for a whole period.

        Workers default to everyone with a non-cancelled assignment in the
        period. Successes with a stored payment land in ``created``; overlap
        rejections and workers with nothing to pay land in ``skipped``; every
        other failure lands in ``failed``. One worker never aborts the cycle;
        a bad period fails the whole report.
        """
        try:
            period_start, period_end = _period(start, end)
            if period_start > period_end:
                raise ValidationError("Start date must be before or equal to end date")
            if worker_ids is None:
                worker_ids = self._assignments.list_worker_ids_in_window(start=period_start, end=period_end)
        except DomainError as e:
            logger.warning("pay_cycle_rejected", start=str(start), end=str(end), error_type=e.error_type, error=str(e))
            return PayCycleReport(success=False, error=str(e), error_type=e.error_type)
        except Exception as e:
            logger.exception("pay_cycle_failed", start=str(start), end=str(end))
            return PayCycleReport(success=False, error=f"Failed to run pay cycle: {e}", error_type="InternalError")

        report = PayCycleReport(start_date=period_start, end_date=period_end)
        for worker_id in worker_ids:
            result = self.calculate_salary(worker_id, period_start, period_end)
            if result.success and result.payment_id is not None:
                report.created.append(result)
            elif result.success or result.error_type == ConflictError.error_type:
                report.skipped.append(result)
            else:
                report.failed.append(result)

        logger.info(
            "pay_cycle_completed",
            start=period_start.isoformat(),
            end=period_end.isoformat(),
            created=len(report.created),
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report

    def update_payment_status(self, payment_id, status) -> OperationResult:
        try:
            pid = require_positive_int(payment_id, "Payment ID")
            try:
                new_status = PaymentStatus(status)
            except ValueError:
                allowed = ", ".join(s.value for s in PaymentStatus)
                raise ValidationError(f"Invalid payment status '{status}', expected one of: {allowed}")

            if self._payments.get_by_id(pid) is None:
                raise ValidationError(f"Payment record {pid} not found")
            if not self._payments.set_status(pid, new_status):
                raise ValidationError(f"Payment record {pid} could not be updated")
        except DomainError as e:
            logger.warning("payment_status_rejected", payment_id=payment_id, error=str(e))
            return OperationResult(success=False, message=str(e), error_type=e.error_type)
        except Exception as e:
            logger.exception("payment_status_failed", payment_id=payment_id)
            return OperationResult(
                success=False, message=f"Failed to update payment status: {e}", error_type="InternalError"
            )

        logger.info("payment_status_updated", payment_id=pid, status=new_status.value)
        return OperationResult(success=True, message=f"Payment status updated to {new_status.value}")
