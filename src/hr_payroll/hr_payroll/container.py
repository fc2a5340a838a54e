from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_PAYROLL_MAX_WORKERS
from .core.enums import OpenRecordPolicy
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_directory import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollRunService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeDirectory
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository
    settings_repo: SettingsRepository

    attendance_service: AttendanceService
    payroll_service: PayrollRunService
    settings_service: SettingsService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees_repo: EmployeeDirectory,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    settings_repo: SettingsRepository,
    payroll_max_workers: int = DEFAULT_PAYROLL_MAX_WORKERS,
    open_record_policy: OpenRecordPolicy = OpenRecordPolicy.ZERO,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    settings_service = SettingsService(settings_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo)
    payroll_service = PayrollRunService(
        payroll_repo,
        attendance_repo,
        employees_repo,
        settings_service,
        open_policy=open_record_policy,
        max_workers=payroll_max_workers,
    )

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        settings_repo=settings_repo,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        settings_service=settings_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    payroll_max_workers: int = DEFAULT_PAYROLL_MAX_WORKERS,
    open_record_policy: str = OpenRecordPolicy.ZERO.value,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees_repo=MySQLEmployeeDirectory(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        payroll_max_workers=payroll_max_workers,
        open_record_policy=OpenRecordPolicy(open_record_policy),
        conn=conn,
    )
