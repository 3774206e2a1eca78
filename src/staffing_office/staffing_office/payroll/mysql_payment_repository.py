from __future__ import annotations

import json
from typing import Optional, Sequence

from ..attendance.model import SkippedRecord
from ..common.datetime_utils import parse_iso_date
from ..core.enums import PaymentStatus, SkipReason
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import SalaryPaymentRecord
from .repository import PaymentRepository

_COLUMNS = """
    payment_id, worker_id, pay_period_start, pay_period_end, days_worked, hours_worked,
    gross_salary, bonus, deduction, net_salary, average_hourly_rate, payment_status, info,
    skipped_records_count, skipped_records_detail, is_advance, reviewed
"""


def _skipped_from_json(raw) -> tuple[SkippedRecord, ...]:
    if not raw:
        return ()
    items = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    return tuple(
        SkippedRecord(
            record_id=int(i["record_id"]),
            date=parse_iso_date(i["date"]) if i.get("date") else None,
            reason=SkipReason(i["reason"]),
        )
        for i in items
    )


def _row_to_record(r: dict) -> SalaryPaymentRecord:
    return SalaryPaymentRecord(
        payment_id=int(r["payment_id"]),
        worker_id=int(r["worker_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        days_worked=to_decimal(r["days_worked"]),
        hours_worked=to_decimal(r["hours_worked"]),
        gross_salary=to_decimal(r["gross_salary"]),
        net_salary=to_decimal(r["net_salary"]),
        average_hourly_rate=to_decimal(r["average_hourly_rate"]),
        payment_status=PaymentStatus(r["payment_status"]),
        info=r.get("info") or "",
        skipped_records_count=int(r.get("skipped_records_count") or 0),
        skipped_records_detail=_skipped_from_json(r.get("skipped_records_detail")),
        is_advance=bool(r["is_advance"]),
        reviewed=bool(r["reviewed"]),
        bonus=to_decimal(r["bonus"]),
        deduction=to_decimal(r["deduction"]),
    )


def _values(record: SalaryPaymentRecord) -> tuple:
    return (
        record.worker_id,
        record.pay_period_start,
        record.pay_period_end,
        record.days_worked,
        record.hours_worked,
        record.gross_salary,
        record.bonus,
        record.deduction,
        record.net_salary,
        record.average_hourly_rate,
        record.payment_status.value,
        record.info,
        record.skipped_records_count,
        json.dumps([s.to_dict() for s in record.skipped_records_detail]),
        int(record.is_advance),
        int(record.reviewed),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_worker(self, worker_id: int, *, is_advance: bool) -> Sequence[SalaryPaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_payments
                WHERE worker_id=%s AND is_advance=%s
                ORDER BY pay_period_start, payment_id
                """,
                (int(worker_id), int(is_advance)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, payment_id: int) -> Optional[SalaryPaymentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def insert(self, record: SalaryPaymentRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_payments(
                    worker_id, pay_period_start, pay_period_end, days_worked, hours_worked,
                    gross_salary, bonus, deduction, net_salary, average_hourly_rate, payment_status, info,
                    skipped_records_count, skipped_records_detail, is_advance, reviewed
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _values(record),
            )
            return int(cur.lastrowid)

    def update(self, payment_id: int, record: SalaryPaymentRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_payments
                SET worker_id=%s, pay_period_start=%s, pay_period_end=%s, days_worked=%s, hours_worked=%s,
                    gross_salary=%s, bonus=%s, deduction=%s, net_salary=%s, average_hourly_rate=%s,
                    payment_status=%s, info=%s, skipped_records_count=%s, skipped_records_detail=%s,
                    is_advance=%s, reviewed=%s
                WHERE payment_id=%s
                """,
                (*_values(record), int(payment_id)),
            )
            return cur.rowcount > 0

    def set_status(self, payment_id: int, status: PaymentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_payments SET payment_status=%s WHERE payment_id=%s",
                (status.value, int(payment_id)),
            )
            return cur.rowcount > 0
