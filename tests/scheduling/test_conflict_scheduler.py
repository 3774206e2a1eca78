from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.staffing_office.staffing_office.core.enums import AssignmentStatus
from src.staffing_office.staffing_office.core.exceptions import InvalidTimeRange, ValidationError
from src.staffing_office.staffing_office.scheduling.conflicts import ConflictScheduler
from src.staffing_office.staffing_office.scheduling.model import Assignment, ProposedAssignment
from src.staffing_office.staffing_office.shifts.interval import TimeInterval


def proposed(worker=1, start="2024-03-01", end="2024-03-05", shift_start="08:00", shift_end="16:00", rate="100"):
    return ProposedAssignment(
        worker_id=worker,
        start_date=start,
        end_date=end,
        shift_start=shift_start,
        shift_end=shift_end,
        pay_rate_per_day=rate,
    )


def existing(aid=1, worker=1, start=date(2024, 3, 1), end=date(2024, 3, 5), shift=("08:00", "16:00"), **kw):
    return Assignment(
        assignment_id=aid,
        worker_id=worker,
        client_id="C1",
        start_date=start,
        end_date=end,
        shift=TimeInterval.from_strings(*shift) if shift else None,
        pay_rate_per_day=Decimal("100"),
        **kw,
    )


def test_prepare_builds_typed_requests():
    [req] = ConflictScheduler().prepare([proposed(worker="3", rate="120.50")], " C1 ")
    assert req.index == 0
    assert req.worker_id == 3
    assert req.client_id == "C1"
    assert req.start_date == date(2024, 3, 1)
    assert req.shift == TimeInterval.from_strings("08:00", "16:00")
    assert req.pay_rate_per_day == Decimal("120.50")


@pytest.mark.parametrize(
    "batch,message",
    [
        ([], "No shift data provided"),
        ([proposed(), proposed(shift_end=None)], "Incomplete shift data at index 1"),
        ([proposed(start="03/01/2024")], "Invalid date format at shift 0"),
        ([proposed(start="2024-03-05", end="2024-03-01")], "End date cannot be before start date at shift 0"),
        ([proposed(rate="0")], "Pay rate per day at shift 0 must be greater than zero"),
    ],
)
def test_prepare_rejects_bad_rows(batch, message):
    with pytest.raises(ValidationError) as exc:
        ConflictScheduler().prepare(batch, "C1")
    assert str(exc.value) == message


def test_prepare_keeps_time_error_type_and_names_the_row():
    with pytest.raises(InvalidTimeRange) as exc:
        ConflictScheduler().prepare([proposed(), proposed(shift_start="10:00", shift_end="10:00")], "C1")
    assert str(exc.value).startswith("Invalid shift times at shift 1:")


def test_back_to_back_shift_is_accepted():
    decision = ConflictScheduler().schedule(
        [proposed(shift_start="16:00", shift_end="23:59")], [existing()], client_id="C1"
    )
    assert decision.accepted
    assert decision.conflicts == ()


def test_overlapping_shift_is_rejected_with_assignment_and_index():
    decision = ConflictScheduler().schedule(
        [proposed(worker=2, shift_start="09:00", shift_end="10:00"), proposed(shift_start="15:00", shift_end="23:59")],
        [existing(aid=42)],
        client_id="C1",
    )
    assert not decision.accepted
    assert decision.conflicts == (
        "Worker 1 has conflicting shifts (date and time overlap) with assignment 42 at shift index 1",
    )


def test_same_clock_hours_on_other_dates_do_not_conflict():
    decision = ConflictScheduler().schedule(
        [proposed(start="2024-03-06", end="2024-03-07")], [existing()], client_id="C1"
    )
    assert decision.accepted


def test_other_workers_and_cancelled_rows_are_ignored():
    rows = [existing(aid=1, worker=9), existing(aid=2, status=AssignmentStatus.CANCELLED)]
    assert ConflictScheduler().schedule([proposed()], rows, client_id="C1").accepted


def test_open_ended_assignment_without_shift_blocks_whole_day():
    row = existing(start=date(2024, 1, 1), end=None, shift=None)
    decision = ConflictScheduler().schedule(
        [proposed(start="2024-06-01", end="2024-06-01", shift_start="02:00", shift_end="03:00")], [row], client_id="C1"
    )
    assert not decision.accepted


def test_overnight_shift_conflicts_with_early_morning_shift():
    decision = ConflictScheduler().schedule(
        [proposed(shift_start="05:00", shift_end="05:30")],
        [existing(shift=("22:00", "06:00"))],
        client_id="C1",
    )
    assert not decision.accepted


def test_conflicts_inside_the_batch_are_reported():
    decision = ConflictScheduler().schedule(
        [
            proposed(shift_start="08:00", shift_end="12:00"),
            proposed(worker=2),
            proposed(start="2024-03-05", end="2024-03-09", shift_start="11:00", shift_end="13:00"),
        ],
        [],
        client_id="C1",
    )
    assert decision.conflicts == ("Worker 1 has conflicting shifts within the new schedule (shifts 0 and 2)",)


def test_every_conflict_is_collected():
    decision = ConflictScheduler().schedule(
        [proposed(), proposed(shift_start="12:00", shift_end="20:00")],
        [existing(aid=7)],
        client_id="C1",
    )
    assert len(decision.conflicts) == 3


def test_update_ignores_the_assignment_being_edited():
    current = existing(aid=1)
    others = [current, existing(aid=2, shift=("16:00", "23:00"))]
    moved = existing(aid=1, shift=("09:00", "17:00"))

    assert ConflictScheduler().conflicts_for_update(current, others) == ()
    assert ConflictScheduler().conflicts_for_update(moved, others) == (
        "Worker 1 has conflicting shifts (date and time overlap) with assignment 2",
    )
