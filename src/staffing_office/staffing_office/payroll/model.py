from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.model import SkippedRecord
from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class SalaryPaymentRecord:
    """Persisted pay-run result for one worker and one period."""

    payment_id: Optional[int]
    worker_id: int
    pay_period_start: date
    pay_period_end: date
    days_worked: Decimal
    hours_worked: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    average_hourly_rate: Decimal = Decimal(0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    info: str = ""
    skipped_records_count: int = 0
    skipped_records_detail: tuple[SkippedRecord, ...] = ()
    is_advance: bool = False
    reviewed: bool = False
    bonus: Decimal = Decimal(0)
    deduction: Decimal = Decimal(0)


@dataclass(frozen=True)
class OverlappingPayment:
    payment_id: int
    pay_period_start: date
    pay_period_end: date

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "pay_period_start": self.pay_period_start.isoformat(),
            "pay_period_end": self.pay_period_end.isoformat(),
        }


@dataclass(frozen=True)
class PayrollResult:
    success: bool
    worker_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    payment_id: Optional[int] = None
    salary: Decimal = Decimal(0)
    net_salary: Decimal = Decimal(0)
    days_worked: Decimal = Decimal(0)
    hours_worked: Decimal = Decimal(0)
    actual_hours: Decimal = Decimal(0)
    average_hourly_rate: Decimal = Decimal(0)
    skipped_records: tuple[SkippedRecord, ...] = ()
    info: Optional[str] = None
    overlapping_payments: tuple[OverlappingPayment, ...] = ()


@dataclass(frozen=True)
class AdvanceResult:
    success: bool
    worker_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    payment_id: Optional[int] = None
    advance_amount: Decimal = Decimal(0)
    assigned_days: int = 0
    info: Optional[str] = None
    overlapping_payments: tuple[OverlappingPayment, ...] = ()


@dataclass(frozen=True)
class PayCycleReport:
    success: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    created: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    failed: list = field(default_factory=list)
