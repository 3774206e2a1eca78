from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import SalaryPaymentRecord


class PaymentRepository(Protocol):
    def list_for_worker(self, worker_id: int, *, is_advance: bool) -> Sequence[SalaryPaymentRecord]:
        raise NotImplementedError

    def get_by_id(self, payment_id: int) -> Optional[SalaryPaymentRecord]:
        raise NotImplementedError

    def insert(self, record: SalaryPaymentRecord) -> int:
        """Returns payment_id."""

        raise NotImplementedError

    def update(self, payment_id: int, record: SalaryPaymentRecord) -> bool:
        raise NotImplementedError

    def set_status(self, payment_id: int, status: PaymentStatus) -> bool:
        raise NotImplementedError
