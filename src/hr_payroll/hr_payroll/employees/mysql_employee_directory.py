from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeDirectory


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        contracted_monthly_salary=as_decimal(r.get("base_salary")),
        department=r.get("department"),
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, role, base_salary, department
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_employees(self, role: Optional[Role] = None) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(
                    "SELECT employee_id, full_name, role, base_salary, department FROM employees ORDER BY employee_id"
                )
            else:
                cur.execute(
                    """
                    SELECT employee_id, full_name, role, base_salary, department
                    FROM employees
                    WHERE role=%s
                    ORDER BY employee_id
                    """,
                    (role.value,),
                )
            return [_to_employee(r) for r in fetchall(cur)]
