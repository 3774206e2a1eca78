from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...common.datetime_utils import ranges_overlap
from ...core.constants import MONEY_QUANT
from ...core.enums import AssignmentStatus, PaymentStatus
from ...core.exceptions import ConflictError, ValidationError
from ...scheduling.model import Assignment
from ...scheduling.repository import AssignmentRepository
from ..model import OverlappingPayment
from ..repository import PaymentRepository


def quantize(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Subclasses share the period validation, the pay-period exclusivity check
    and the selection of assignments that touch the period.
    """

    is_advance: bool = False
    overlap_message = "A salary payment for this worker already exists for an overlapping period."

    def __init__(self, assignments: AssignmentRepository, payments: PaymentRepository):
        self._assignments = assignments
        self._payments = payments

    @abstractmethod
    def calculate(self, *, worker_id: int, start: date, end: date, existing_payment_id: Optional[int] = None):
        raise NotImplementedError

    @staticmethod
    def validate_period(start: date, end: date) -> None:
        if start > end:
            raise ValidationError("Start date must be before or equal to end date")

    def check_overlaps(self, *, worker_id: int, start: date, end: date, exclude_payment_id: Optional[int] = None) -> None:
        overlapping = [
            OverlappingPayment(
                payment_id=p.payment_id,
                pay_period_start=p.pay_period_start,
                pay_period_end=p.pay_period_end,
            )
            for p in self._payments.list_for_worker(worker_id, is_advance=self.is_advance)
            if p.payment_status != PaymentStatus.CANCELLED
            and p.is_advance == self.is_advance
            and (exclude_payment_id is None or p.payment_id != exclude_payment_id)
            and start <= p.pay_period_end
            and end >= p.pay_period_start
        ]
        if overlapping:
            raise ConflictError(
                self.overlap_message,
                conflicts=[
                    f"Payment {o.payment_id} covers {o.pay_period_start.isoformat()} to {o.pay_period_end.isoformat()}"
                    for o in overlapping
                ],
                overlapping=overlapping,
            )

    def relevant_assignments(self, *, worker_id: int, start: date, end: date) -> list[Assignment]:
        return [
            a
            for a in self._assignments.list_for_worker(worker_id)
            if a.status != AssignmentStatus.CANCELLED and ranges_overlap(a.start_date, a.end_date, start, end)
        ]
