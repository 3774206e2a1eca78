from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.staffing_office.staffing_office.attendance.aggregator import AttendanceAggregator
from src.staffing_office.staffing_office.attendance.model import AttendanceRecord
from src.staffing_office.staffing_office.core.constants import ADVANCE_SALARY_INFO, NO_ASSIGNMENTS_INFO
from src.staffing_office.staffing_office.core.enums import AssignmentStatus, PaymentStatus
from src.staffing_office.staffing_office.payroll.model import SalaryPaymentRecord
from src.staffing_office.staffing_office.payroll.service import PayrollService
from src.staffing_office.staffing_office.scheduling.model import Assignment
from src.staffing_office.staffing_office.shifts.interval import TimeInterval
from tests.fakes import InMemoryAssignments, InMemoryAttendance, InMemoryPayments


def assignment(aid=1, worker=1, start=date(2024, 1, 1), end=date(2024, 1, 31), rate="800", status=AssignmentStatus.ACTIVE):
    return Assignment(
        assignment_id=aid,
        worker_id=worker,
        client_id="C1",
        start_date=start,
        end_date=end,
        shift=TimeInterval.from_strings("09:00", "17:00"),
        pay_rate_per_day=Decimal(rate),
        status=status,
    )


def payment(pid, start, end, *, worker=1, status=PaymentStatus.PENDING, is_advance=False):
    return SalaryPaymentRecord(
        payment_id=pid,
        worker_id=worker,
        pay_period_start=start,
        pay_period_end=end,
        days_worked=Decimal(0),
        hours_worked=Decimal(0),
        gross_salary=Decimal(0),
        net_salary=Decimal(0),
        payment_status=status,
        is_advance=is_advance,
    )


def rec(rid, day, worked, assignment_id=1, clock_in="09:00:00"):
    return AttendanceRecord(rid, assignment_id, date(2024, 1, day), clock_in, "17:00:00", worked)


def make_service(*, rows=(), records=(), payments=()):
    assignments = InMemoryAssignments(rows)
    payment_repo = InMemoryPayments(payments)
    service = PayrollService(assignments, payment_repo, AttendanceAggregator(InMemoryAttendance(records)))
    return service, payment_repo


RECORDS = [
    rec(1, 2, "08:00"),
    rec(2, 3, "10:00"),
    rec(3, 4, "04:00"),
    rec(4, 5, "08:00", clock_in=None),
    rec(5, 8, "xx"),
]


# ---------------------------------------------------------------------------
# calculate_salary


def test_salary_from_attendance_is_stored_as_pending():
    service, payments = make_service(rows=[assignment()], records=RECORDS)

    result = service.calculate_salary(1, "2024-01-01", "2024-01-15")

    assert result.success
    assert result.salary == Decimal("2000.00")
    assert result.net_salary == Decimal("2000.00")
    assert result.days_worked == Decimal("3.00")
    assert result.hours_worked == Decimal("20.00")
    assert result.actual_hours == Decimal("22.00")
    assert result.average_hourly_rate == Decimal("90.91")
    assert result.info == "3 days [3 days (800/day)] | SKIPPED: 2 records (1 missing data, 1 invalid hours)"
    assert len(result.skipped_records) == 2

    stored = payments.records[result.payment_id]
    assert stored.payment_status == PaymentStatus.PENDING
    assert stored.reviewed is False
    assert stored.is_advance is False
    assert stored.skipped_records_count == 2
    assert stored.gross_salary == Decimal("2000.00")


def test_overlapping_pay_period_is_rejected_with_the_existing_payment():
    existing = payment(7, date(2024, 1, 10), date(2024, 1, 20))
    service, payments = make_service(rows=[assignment()], records=RECORDS, payments=[existing])

    result = service.calculate_salary(1, "2024-01-01", "2024-01-15")

    assert not result.success
    assert result.error_type == "ConflictError"
    assert result.error == "A salary payment for this worker already exists for an overlapping period."
    assert [p.payment_id for p in result.overlapping_payments] == [7]
    assert result.overlapping_payments[0].to_dict() == {
        "payment_id": 7,
        "pay_period_start": "2024-01-10",
        "pay_period_end": "2024-01-20",
    }
    assert list(payments.records) == [7]


def test_cancelled_and_advance_payments_do_not_block_salary():
    service, _ = make_service(
        rows=[assignment()],
        records=RECORDS,
        payments=[
            payment(7, date(2024, 1, 10), date(2024, 1, 20), status=PaymentStatus.CANCELLED),
            payment(8, date(2024, 1, 1), date(2024, 1, 31), is_advance=True),
        ],
    )

    assert service.calculate_salary(1, "2024-01-01", "2024-01-15").success


def test_adjacent_periods_do_not_overlap():
    service, _ = make_service(rows=[assignment()], payments=[payment(7, date(2023, 12, 16), date(2023, 12, 31))])

    assert service.calculate_salary(1, "2024-01-01", "2024-01-15").success


def test_worker_without_assignments_gets_zero_pay_and_nothing_stored():
    service, payments = make_service(rows=[assignment(worker=2)])

    result = service.calculate_salary(1, "2024-01-01", "2024-01-15")

    assert result.success
    assert result.salary == 0
    assert result.payment_id is None
    assert result.info == NO_ASSIGNMENTS_INFO
    assert payments.records == {}


def test_cancelled_assignments_are_not_paid():
    service, _ = make_service(rows=[assignment(status=AssignmentStatus.CANCELLED)], records=RECORDS)

    assert service.calculate_salary(1, "2024-01-01", "2024-01-15").info == NO_ASSIGNMENTS_INFO


def test_recalculation_updates_in_place_and_keeps_adjustments():
    existing = SalaryPaymentRecord(
        payment_id=3,
        worker_id=1,
        pay_period_start=date(2024, 1, 1),
        pay_period_end=date(2024, 1, 15),
        days_worked=Decimal(1),
        hours_worked=Decimal(8),
        gross_salary=Decimal(800),
        net_salary=Decimal(850),
        payment_status=PaymentStatus.PAID,
        reviewed=True,
        bonus=Decimal(100),
        deduction=Decimal(50),
    )
    service, payments = make_service(rows=[assignment()], records=RECORDS, payments=[existing])

    result = service.calculate_salary(1, "2024-01-01", "2024-01-15", existing_payment_id=3)

    assert result.success
    assert result.payment_id == 3
    assert list(payments.records) == [3]
    stored = payments.records[3]
    assert stored.gross_salary == Decimal("2000.00")
    assert stored.net_salary == Decimal("2050.00")
    assert stored.payment_status == PaymentStatus.PENDING
    assert stored.reviewed is False


def test_calculation_rejections():
    service, _ = make_service(rows=[assignment()])

    backwards = service.calculate_salary(1, "2024-01-15", "2024-01-01")
    assert backwards.error == "Start date must be before or equal to end date"
    assert backwards.error_type == "ValidationError"

    missing = service.calculate_salary(1, "2024-01-01", "2024-01-15", existing_payment_id=99)
    assert missing.error == "Payment record 99 not found"

    assert service.calculate_salary(1, "01/01/2024", "2024-01-15").error_type == "ValidationError"
    assert service.calculate_salary("abc", "2024-01-01", "2024-01-15").error_type == "ValidationError"


# ---------------------------------------------------------------------------
# advance salary


def test_advance_salary_prorates_assignment_days():
    service, payments = make_service(
        rows=[
            assignment(aid=1, start=date(2024, 3, 1), end=date(2024, 3, 5), rate="100"),
            assignment(aid=2, start=date(2024, 3, 9), end=None, rate="50"),
            assignment(aid=3, start=date(2024, 3, 1), end=None, rate="999", status=AssignmentStatus.CANCELLED),
        ]
    )

    result = service.create_advance_salary(1, "2024-03-04", "2024-03-10")

    assert result.success
    assert result.advance_amount == Decimal("300.00")
    assert result.assigned_days == 4
    assert result.info == ADVANCE_SALARY_INFO
    stored = payments.records[result.payment_id]
    assert stored.is_advance is True
    assert stored.hours_worked == 0


def test_second_advance_for_overlapping_period_is_rejected():
    service, _ = make_service(rows=[assignment(start=date(2024, 3, 1), end=date(2024, 3, 31))])

    assert service.create_advance_salary(1, "2024-03-01", "2024-03-15").success
    again = service.create_advance_salary(1, "2024-03-15", "2024-03-31")

    assert not again.success
    assert again.error_type == "ConflictError"
    assert again.error == "Advance salary already exists for an overlapping period."
    assert len(again.overlapping_payments) == 1


# ---------------------------------------------------------------------------
# pay cycle and payment status


def test_pay_cycle_collects_every_outcome():
    service, payments = make_service(
        rows=[assignment(aid=1, worker=1), assignment(aid=2, worker=2), assignment(aid=3, worker=3, end=date(2023, 12, 31))],
        records=RECORDS,
        payments=[payment(9, date(2024, 1, 10), date(2024, 1, 12), worker=2)],
    )

    report = service.run_pay_cycle("2024-01-01", "2024-01-15")

    assert [r.worker_id for r in report.created] == [1]
    assert [r.worker_id for r in report.skipped] == [2]
    assert report.failed == []
    assert len(payments.records) == 2


def test_pay_cycle_keeps_going_after_a_failure():
    service, _ = make_service(rows=[assignment(aid=1, worker=1)], records=RECORDS)

    report = service.run_pay_cycle("2024-01-01", "2024-01-15", worker_ids=["abc", 1, 2])

    assert [r.worker_id for r in report.failed] == ["abc"]
    assert [r.worker_id for r in report.created] == [1]
    assert [r.worker_id for r in report.skipped] == [2]


@pytest.mark.parametrize(
    "start,end,error",
    [
        ("2024-02-01", "2024-01-01", "Start date must be before or equal to end date"),
        ("2024/01/01", "2024-01-15", "Invalid date format, expected YYYY-MM-DD"),
        (None, "2024-01-15", "Invalid date format, expected YYYY-MM-DD"),
    ],
)
def test_pay_cycle_with_bad_period_returns_failed_report(start, end, error):
    service, payments = make_service(rows=[assignment(aid=1, worker=1)], records=RECORDS)

    report = service.run_pay_cycle(start, end)

    assert not report.success
    assert report.error_type == "ValidationError"
    assert report.error == error
    assert report.created == report.skipped == report.failed == []
    assert payments.records == {}


def test_cancelling_a_payment_releases_its_period():
    service, payments = make_service(rows=[assignment()], records=RECORDS, payments=[payment(7, date(2024, 1, 10), date(2024, 1, 20))])

    assert not service.calculate_salary(1, "2024-01-01", "2024-01-15").success

    status = service.update_payment_status(7, "cancelled")
    assert status.success
    assert payments.records[7].payment_status == PaymentStatus.CANCELLED

    assert service.calculate_salary(1, "2024-01-01", "2024-01-15").success


def test_payment_status_rejections():
    service, _ = make_service(payments=[payment(7, date(2024, 1, 1), date(2024, 1, 15))])

    bad = service.update_payment_status(7, "refunded")
    assert not bad.success
    assert bad.message == "Invalid payment status 'refunded', expected one of: pending, paid, cancelled"

    assert service.update_payment_status(99, "paid").message == "Payment record 99 not found"
    assert service.update_payment_status(7, "paid").success
