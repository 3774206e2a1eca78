from __future__ import annotations

from typing import Sequence

from ..core.enums import WorkerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .repository import WorkerRepository


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_existing_ids(self, worker_ids: Sequence[int]) -> set[int]:
        ids = [int(w) for w in worker_ids]
        if not ids:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT worker_id FROM workers WHERE worker_id IN ({placeholders(len(ids))})",
                tuple(ids),
            )
            return {int(r["worker_id"]) for r in fetchall(cur)}

    def set_status(self, worker_id: int, status: WorkerStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE workers SET status=%s WHERE worker_id=%s", (status.value, int(worker_id)))
            if cur.rowcount == 0:
                raise LookupError(f"Worker {worker_id} not found")
