from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from ...common.datetime_utils import overlap_days
from ...core.constants import ADVANCE_SALARY_INFO
from ...core.enums import PaymentStatus
from ...core.exceptions import ValidationError
from ..model import AdvanceResult, SalaryPaymentRecord
from .base import PayrollCalculator, quantize

logger = structlog.get_logger(__name__)


class AdvancePayrollCalculator(PayrollCalculator):
    """Advance pay: ``rate * days`` for every assignment day inside the period.

    Attendance is not consulted.
    """

    is_advance = True
    overlap_message = "Advance salary already exists for an overlapping period."

    def calculate(
        self,
        *,
        worker_id: int,
        start: date,
        end: date,
        existing_payment_id: Optional[int] = None,
    ) -> AdvanceResult:
        if existing_payment_id is not None:
            raise ValidationError("Advance payments cannot be recalculated")
        self.validate_period(start, end)
        self.check_overlaps(worker_id=worker_id, start=start, end=end)

        total = Decimal(0)
        assigned_days = 0
        for a in self.relevant_assignments(worker_id=worker_id, start=start, end=end):
            if not a.pay_rate_per_day:
                continue
            days = overlap_days(start, end, a.start_date, a.end_date)
            total += a.pay_rate_per_day * days
            assigned_days += days

        amount = quantize(total)
        payment_id = self._payments.insert(
            SalaryPaymentRecord(
                payment_id=None,
                worker_id=worker_id,
                pay_period_start=start,
                pay_period_end=end,
                days_worked=Decimal(assigned_days),
                hours_worked=Decimal(0),
                gross_salary=amount,
                net_salary=amount,
                payment_status=PaymentStatus.PENDING,
                info=ADVANCE_SALARY_INFO,
                is_advance=True,
                reviewed=False,
            )
        )

        logger.info("advance_salary_created", worker_id=worker_id, payment_id=payment_id, amount=str(amount))
        return AdvanceResult(
            success=True,
            worker_id=worker_id,
            start_date=start,
            end_date=end,
            payment_id=payment_id,
            advance_amount=amount,
            assigned_days=assigned_days,
            info=ADVANCE_SALARY_INFO,
        )
