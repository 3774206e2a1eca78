from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, time_text
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_assignments(
        self,
        *,
        assignment_ids: Sequence[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        ids = [int(a) for a in assignment_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, assignment_id, work_date, clock_in, clock_out, total_worked
                FROM attendance_records
                WHERE assignment_id IN ({placeholders(len(ids))})
                  AND work_date BETWEEN %s AND %s
                ORDER BY work_date, attendance_id
                """,
                (*ids, start_date, end_date),
            )
            return [
                AttendanceRecord(
                    attendance_id=int(r["attendance_id"]),
                    assignment_id=int(r["assignment_id"]),
                    work_date=r["work_date"],
                    clock_in=time_text(r.get("clock_in")),
                    clock_out=time_text(r.get("clock_out")),
                    total_worked=r.get("total_worked"),
                )
                for r in fetchall(cur)
            ]

    def count_for_assignment(self, assignment_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM attendance_records WHERE assignment_id=%s",
                (int(assignment_id),),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0
