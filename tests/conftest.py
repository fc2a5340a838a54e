from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Mapping, Optional

import pytest

from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord
from src.hr_payroll.hr_payroll.common.datetime_utils import month_number
from src.hr_payroll.hr_payroll.core.enums import PayrollStatus, Role
from src.hr_payroll.hr_payroll.employees.model import Employee
from src.hr_payroll.hr_payroll.payroll.model import PayrollRecord


class InMemoryAttendance:
    def __init__(self, records: Optional[list[AttendanceRecord]] = None):
        self._lock = threading.Lock()
        self._by_day: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.writes = 0
        for r in records or []:
            self._id += 1
            self._by_day[(r.employee_id, r.work_date)] = replace(r, attendance_id=self._id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_day.get((employee_id, work_date))

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self._by_day.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def get_for_employee_between(self, employee_id: int, start_date: date, end_date: date):
        items = [
            r for r in self._by_day.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]
        return sorted(items, key=lambda r: r.work_date)

    def apply_transition(self, *, employee_id: int, work_date: date, transition) -> AttendanceRecord:
        with self._lock:
            current = self._by_day.get((employee_id, work_date))
            updated = transition(current)
            if current is None:
                self._id += 1
                updated = replace(updated, attendance_id=self._id)
            self._by_day[(employee_id, work_date)] = updated
            self.writes += 1
            return updated


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._by_id = {e.employee_id: e for e in employees}

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_employees(self, role: Optional[Role] = None):
        return [e for e in self._by_id.values() if role is None or e.role == role]


class InMemoryPayroll:
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, PayrollRecord] = {}
        self._id = 0
        self.upserts = 0

    def _find(self, employee_id: int, month: str, year: int) -> Optional[PayrollRecord]:
        for r in self._by_id.values():
            if (r.employee_id, r.month, r.year) == (employee_id, month, year):
                return r
        return None

    def upsert_computed(self, *, employee_id, month, year, base_salary, total_hours, net_salary, payment_date):
        with self._lock:
            self.upserts += 1
            existing = self._find(employee_id, month, year)
            if existing:
                rec = replace(
                    existing,
                    base_salary=base_salary,
                    total_hours=total_hours,
                    net_salary=net_salary,
                    payment_date=payment_date,
                )
            else:
                self._id += 1
                rec = PayrollRecord(
                    payroll_id=self._id,
                    employee_id=employee_id,
                    month=month,
                    year=year,
                    base_salary=base_salary,
                    total_hours=total_hours,
                    bonuses=Decimal("0.00"),
                    deductions=Decimal("0.00"),
                    net_salary=net_salary,
                    status=PayrollStatus.PENDING,
                    payment_date=payment_date,
                )
            self._by_id[rec.payroll_id] = rec
            return rec

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self._by_id.get(payroll_id)

    def get_for_employee_period(self, employee_id: int, month: str, year: int) -> Optional[PayrollRecord]:
        return self._find(employee_id, month, year)

    def update_adjustments(self, *, payroll_id, bonuses=None, deductions=None, net_salary=None, status=None):
        changes = {
            name: value
            for name, value in (
                ("bonuses", bonuses),
                ("deductions", deductions),
                ("net_salary", net_salary),
                ("status", status),
            )
            if value is not None
        }
        with self._lock:
            existing = self._by_id.get(payroll_id)
            if not existing:
                return None
            self._by_id[payroll_id] = replace(existing, **changes)
            return self._by_id[payroll_id]

    def list_history(self, employee_id: Optional[int] = None):
        items = [r for r in self._by_id.values() if employee_id is None or r.employee_id == employee_id]
        items.sort(key=lambda r: r.employee_id)
        return sorted(items, key=lambda r: (r.year, month_number(r.month)), reverse=True)

    def all(self) -> list[PayrollRecord]:
        return sorted(self._by_id.values(), key=lambda r: r.payroll_id)


class InMemorySettings:
    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self.values = dict(values or {})
        self.reads = 0

    def get_setting(self, key: str) -> Optional[str]:
        self.reads += 1
        return self.values.get(key)

    def get_all(self) -> dict[str, str]:
        return dict(self.values)

    def upsert_many(self, values: Mapping[str, str]) -> None:
        self.values.update(values)


def make_employee(employee_id: int, salary: str = "3000", role: Role = Role.EMPLOYEE) -> Employee:
    return Employee(
        employee_id=employee_id,
        full_name=f"Employee {employee_id}",
        role=role,
        contracted_monthly_salary=Decimal(salary),
        department="Finance",
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 4, 14, 9, 0, 0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            make_employee(1, "0", Role.ADMIN),
            make_employee(2, "3000"),
            make_employee(3, "4200"),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def payroll_repo() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings({"standard_hours": "8"})


@pytest.fixture
def make_attendance():
    return InMemoryAttendance


@pytest.fixture
def make_employees():
    def factory(*employees: Employee) -> InMemoryEmployees:
        return InMemoryEmployees(list(employees))

    return factory


@pytest.fixture
def employee_factory():
    return make_employee
