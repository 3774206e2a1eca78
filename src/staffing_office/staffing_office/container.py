from __future__ import annotations

from dataclasses import dataclass

from .attendance.aggregator import AttendanceAggregator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import DEFAULT_STATUS_UPDATE_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .payroll.mysql_payment_repository import MySQLPaymentRepository
from .payroll.repository import PaymentRepository
from .payroll.service import PayrollService
from .scheduling.mysql_assignment_repository import MySQLAssignmentRepository
from .scheduling.mysql_client_repository import MySQLClientRepository
from .scheduling.mysql_worker_repository import MySQLWorkerRepository
from .scheduling.repository import AssignmentRepository, ClientRepository, WorkerRepository
from .scheduling.service import SchedulingService


@dataclass(frozen=True)
class Container:
    workers_repo: WorkerRepository
    clients_repo: ClientRepository
    assignments_repo: AssignmentRepository
    attendance_repo: AttendanceRepository
    payments_repo: PaymentRepository

    scheduling_service: SchedulingService
    payroll_service: PayrollService


def wire(
    *,
    workers_repo: WorkerRepository,
    clients_repo: ClientRepository,
    assignments_repo: AssignmentRepository,
    attendance_repo: AttendanceRepository,
    payments_repo: PaymentRepository,
    status_update_workers: int = DEFAULT_STATUS_UPDATE_WORKERS,
) -> Container:
    """Build the services over any repositories (MySQL or in-memory)."""
    scheduling_service = SchedulingService(
        assignments_repo,
        workers_repo,
        clients_repo,
        attendance_repo,
        status_update_workers=status_update_workers,
    )
    payroll_service = PayrollService(assignments_repo, payments_repo, AttendanceAggregator(attendance_repo))

    return Container(
        workers_repo=workers_repo,
        clients_repo=clients_repo,
        assignments_repo=assignments_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        scheduling_service=scheduling_service,
        payroll_service=payroll_service,
    )


def build_container(*, db_config: dict, status_update_workers: int = DEFAULT_STATUS_UPDATE_WORKERS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        workers_repo=MySQLWorkerRepository(conn),
        clients_repo=MySQLClientRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        status_update_workers=status_update_workers,
    )
