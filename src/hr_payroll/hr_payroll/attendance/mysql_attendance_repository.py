from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import ConcurrencyConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository, Transition

_COLUMNS = "attendance_id, employee_id, work_date, clock_in_time, break_start_time, break_end_time, clock_out_time"

# ER_LOCK_WAIT_TIMEOUT, ER_LOCK_DEADLOCK
_LOCK_ERRNOS = (1205, 1213)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in_time=r["clock_in_time"],
        break_start_time=r.get("break_start_time"),
        break_end_time=r.get("break_end_time"),
        clock_out_time=r.get("clock_out_time"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_between(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (employee_id, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def apply_transition(self, *, employee_id: int, work_date: date, transition: Transition) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Row lock (or gap lock when absent) held until commit.
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance
                    WHERE employee_id=%s AND work_date=%s
                    FOR UPDATE
                    """,
                    (employee_id, work_date),
                )
                r = fetchone(cur)
                current = _to_record(r) if r else None

                updated = transition(current)

                if current is None:
                    cur.execute(
                        """
                        INSERT INTO attendance(employee_id, work_date, clock_in_time, status)
                        VALUES(%s,%s,%s,%s)
                        """,
                        (employee_id, work_date, updated.clock_in_time, updated.status.value),
                    )
                    return replace(updated, attendance_id=int(cur.lastrowid))

                cur.execute(
                    """
                    UPDATE attendance
                    SET break_start_time=%s, break_end_time=%s, clock_out_time=%s, status=%s
                    WHERE attendance_id=%s
                    """,
                    (
                        updated.break_start_time,
                        updated.break_end_time,
                        updated.clock_out_time,
                        updated.status.value,
                        current.attendance_id,
                    ),
                )
                return updated
        except mysql_errors.IntegrityError as e:
            # Another request inserted the same (employee_id, work_date) first.
            raise ConcurrencyConflict(f"Concurrent clock action for employee {employee_id} on {work_date}") from e
        except mysql_errors.DatabaseError as e:
            if getattr(e, "errno", None) in _LOCK_ERRNOS:
                raise ConcurrencyConflict(f"Lock contention for employee {employee_id} on {work_date}") from e
            raise
