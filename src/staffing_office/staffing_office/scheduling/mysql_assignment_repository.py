from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AssignmentStatus, AttendanceMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, placeholders, to_decimal
from ..shifts.interval import TimeInterval, clock_strings
from .model import Assignment, ShiftRequest
from .repository import AssignmentRepository

_COLUMNS = """
    assignment_id, worker_id, client_id, start_date, end_date, shift_start, shift_end,
    pay_rate_per_day, status, attendance_mode, shift_start_at, shift_end_at, calculated_attendance_days
"""


def _row_to_assignment(r: dict) -> Assignment:
    start = normalize_mysql_time(r.get("shift_start"))
    end = normalize_mysql_time(r.get("shift_end"))
    return Assignment(
        assignment_id=int(r["assignment_id"]),
        worker_id=int(r["worker_id"]),
        client_id=str(r["client_id"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        shift=TimeInterval.from_strings(start, end) if start is not None and end is not None else None,
        pay_rate_per_day=to_decimal(r.get("pay_rate_per_day")),
        status=AssignmentStatus(r["status"]),
        attendance_mode=AttendanceMode(r.get("attendance_mode") or AttendanceMode.DAILY.value),
        shift_start_at=r.get("shift_start_at"),
        shift_end_at=r.get("shift_end_at"),
        calculated_attendance_days=to_decimal(r.get("calculated_attendance_days")),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assignments WHERE assignment_id=%s", (int(assignment_id),))
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def list_in_window(self, *, worker_ids: Sequence[int], start: date, end: date) -> Sequence[Assignment]:
        ids = [int(w) for w in worker_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM assignments
                WHERE worker_id IN ({placeholders(len(ids))})
                  AND start_date <= %s
                  AND (end_date IS NULL OR end_date >= %s)
                ORDER BY worker_id, start_date, assignment_id
                """,
                (*ids, end, start),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_for_worker(self, worker_id: int) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assignments WHERE worker_id=%s ORDER BY start_date, assignment_id",
                (int(worker_id),),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_worker_ids_in_window(self, *, start: date, end: date) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT worker_id
                FROM assignments
                WHERE status <> 'cancelled'
                  AND start_date <= %s
                  AND (end_date IS NULL OR end_date >= %s)
                ORDER BY worker_id
                """,
                (end, start),
            )
            return [int(r["worker_id"]) for r in fetchall(cur)]

    def insert_batch(self, requests: Sequence[ShiftRequest]) -> Sequence[Assignment]:
        inserted: list[Assignment] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for req in requests:
                shift_start, shift_end = clock_strings(req.shift)
                cur.execute(
                    """
                    INSERT INTO assignments(
                        worker_id, client_id, start_date, end_date, shift_start, shift_end,
                        pay_rate_per_day, status, attendance_mode
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        req.worker_id,
                        req.client_id,
                        req.start_date,
                        req.end_date,
                        shift_start,
                        shift_end,
                        req.pay_rate_per_day,
                        AssignmentStatus.ACTIVE.value,
                        AttendanceMode.DAILY.value,
                    ),
                )
                inserted.append(
                    Assignment(
                        assignment_id=int(cur.lastrowid),
                        worker_id=req.worker_id,
                        client_id=req.client_id,
                        start_date=req.start_date,
                        end_date=req.end_date,
                        shift=req.shift,
                        pay_rate_per_day=req.pay_rate_per_day,
                    )
                )
            if len(inserted) != len(requests):
                raise RuntimeError("Not all shifts were inserted successfully")
        return inserted

    def update(self, assignment_id: int, fields: Mapping[str, Any]) -> bool:
        sets: list[str] = []
        params: list[Any] = []
        for key, value in fields.items():
            if key == "shift":
                shift_start, shift_end = clock_strings(value)
                sets += ["shift_start=%s", "shift_end=%s"]
                params += [shift_start, shift_end]
            elif key == "status":
                sets.append("status=%s")
                params.append(AssignmentStatus(value).value)
            elif key in ("start_date", "end_date", "pay_rate_per_day"):
                sets.append(f"{key}=%s")
                params.append(value)
            else:
                raise ValueError(f"Unsupported assignment column: {key}")
        if not sets:
            return False

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE assignments SET {', '.join(sets)} WHERE assignment_id=%s",
                (*params, int(assignment_id)),
            )
            return cur.rowcount > 0

    def delete(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0

    def count_for_worker(self, worker_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS cnt FROM assignments WHERE worker_id=%s", (int(worker_id),))
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0
