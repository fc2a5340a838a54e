from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import PayrollRecord
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, p.month, p.year, p.base_salary, p.total_hours,
           p.bonuses, p.deductions, p.net_salary, p.status, p.payment_date,
           e.full_name, e.department
    FROM payroll p
    LEFT JOIN employees e ON e.employee_id = p.employee_id
"""

# Calendar order for the month name column.
_MONTH_ORDER = (
    "FIELD(p.month, 'January','February','March','April','May','June','July',"
    "'August','September','October','November','December')"
)


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        year=int(r["year"]),
        base_salary=as_decimal(r.get("base_salary")),
        total_hours=as_decimal(r.get("total_hours")),
        bonuses=as_decimal(r.get("bonuses")),
        deductions=as_decimal(r.get("deductions")),
        net_salary=as_decimal(r.get("net_salary")),
        status=PayrollStatus(r["status"]),
        payment_date=r["payment_date"],
        employee_name=r.get("full_name"),
        department=r.get("department"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_computed(
        self,
        *,
        employee_id: int,
        month: str,
        year: int,
        base_salary: Decimal,
        total_hours: Decimal,
        net_salary: Decimal,
        payment_date: date,
    ) -> PayrollRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll
                    (employee_id, month, year, base_salary, total_hours, bonuses, deductions, net_salary, status, payment_date)
                VALUES (%s, %s, %s, %s, %s, 0, 0, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    total_hours=VALUES(total_hours),
                    net_salary=VALUES(net_salary),
                    base_salary=VALUES(base_salary),
                    payment_date=VALUES(payment_date)
                """,
                (
                    employee_id,
                    month,
                    int(year),
                    base_salary,
                    total_hours,
                    net_salary,
                    PayrollStatus.PENDING.value,
                    payment_date,
                ),
            )
            cur.execute(
                _SELECT + " WHERE p.employee_id=%s AND p.month=%s AND p.year=%s",
                (employee_id, month, int(year)),
            )
            return _to_record(fetchone(cur))

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_period(self, employee_id: int, month: str, year: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE p.employee_id=%s AND p.month=%s AND p.year=%s",
                (employee_id, month, int(year)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def update_adjustments(
        self,
        *,
        payroll_id: int,
        bonuses: Optional[Decimal] = None,
        deductions: Optional[Decimal] = None,
        net_salary: Optional[Decimal] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll
                SET bonuses=COALESCE(%s, bonuses),
                    deductions=COALESCE(%s, deductions),
                    net_salary=COALESCE(%s, net_salary),
                    status=COALESCE(%s, status)
                WHERE payroll_id=%s
                """,
                (bonuses, deductions, net_salary, status.value if status is not None else None, int(payroll_id)),
            )
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_history(self, employee_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("p.employee_id=%s")
            params.append(int(employee_id))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + where + f" ORDER BY p.year DESC, {_MONTH_ORDER} DESC, p.employee_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
