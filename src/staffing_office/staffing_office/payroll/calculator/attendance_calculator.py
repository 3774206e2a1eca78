from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from ...attendance.aggregator import AttendanceAggregator
from ...core.constants import NO_ASSIGNMENTS_INFO
from ...core.enums import PaymentStatus
from ...core.exceptions import ValidationError
from ...scheduling.repository import AssignmentRepository
from ..model import PayrollResult, SalaryPaymentRecord
from ..repository import PaymentRepository
from ..summary import build_info
from .base import PayrollCalculator, quantize

logger = structlog.get_logger(__name__)


class AttendancePayrollCalculator(PayrollCalculator):
    """Gross pay from recorded attendance across all of a worker's assignments."""

    def __init__(
        self,
        assignments: AssignmentRepository,
        payments: PaymentRepository,
        aggregator: AttendanceAggregator,
    ):
        super().__init__(assignments, payments)
        self._aggregator = aggregator

    def calculate(
        self,
        *,
        worker_id: int,
        start: date,
        end: date,
        existing_payment_id: Optional[int] = None,
    ) -> PayrollResult:
        self.validate_period(start, end)

        existing = None
        if existing_payment_id is not None:
            existing = self._payments.get_by_id(existing_payment_id)
            if existing is None or existing.worker_id != worker_id or existing.is_advance:
                raise ValidationError(f"Payment record {existing_payment_id} not found")

        self.check_overlaps(worker_id=worker_id, start=start, end=end, exclude_payment_id=existing_payment_id)

        assignments = self.relevant_assignments(worker_id=worker_id, start=start, end=end)
        if not assignments:
            logger.info("payroll_no_assignments", worker_id=worker_id, start=start.isoformat(), end=end.isoformat())
            return PayrollResult(
                success=True,
                worker_id=worker_id,
                start_date=start,
                end_date=end,
                payment_id=existing_payment_id,
                info=NO_ASSIGNMENTS_INFO,
            )

        summary = self._aggregator.aggregate(assignments, start=start, end=end)

        gross = quantize(summary.gross_pay)
        days = quantize(summary.days_worked)
        hours = quantize(summary.billable_hours)
        actual = quantize(summary.actual_hours)
        average = quantize(summary.gross_pay / summary.actual_hours) if summary.actual_hours > 0 else Decimal(0)

        bonus = existing.bonus if existing else Decimal(0)
        deduction = existing.deduction if existing else Decimal(0)

        info = build_info(summary.days_worked, summary.rate_buckets, summary.skipped)
        record = SalaryPaymentRecord(
            payment_id=existing_payment_id,
            worker_id=worker_id,
            pay_period_start=start,
            pay_period_end=end,
            days_worked=days,
            hours_worked=hours,
            gross_salary=gross,
            net_salary=gross + bonus - deduction,
            average_hourly_rate=average,
            payment_status=PaymentStatus.PENDING,
            info=info,
            skipped_records_count=len(summary.skipped),
            skipped_records_detail=summary.skipped,
            is_advance=False,
            reviewed=False,
            bonus=bonus,
            deduction=deduction,
        )

        if existing_payment_id is not None:
            if not self._payments.update(existing_payment_id, record):
                raise ValidationError(f"Payment record {existing_payment_id} could not be updated")
            payment_id = existing_payment_id
        else:
            payment_id = self._payments.insert(record)

        logger.info(
            "payroll_calculated",
            worker_id=worker_id,
            payment_id=payment_id,
            days_worked=str(days),
            gross=str(gross),
            records_seen=summary.records_seen,
            skipped=len(summary.skipped),
        )
        return PayrollResult(
            success=True,
            worker_id=worker_id,
            start_date=start,
            end_date=end,
            payment_id=payment_id,
            salary=gross,
            net_salary=record.net_salary,
            days_worked=days,
            hours_worked=hours,
            actual_hours=actual,
            average_hourly_rate=average,
            skipped_records=summary.skipped,
            info=info,
        )
