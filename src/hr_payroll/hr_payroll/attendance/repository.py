from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceRecord

Transition = Callable[[Optional[AttendanceRecord]], AttendanceRecord]


class AttendanceRepository(Protocol):
    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_between(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def apply_transition(self, *, employee_id: int, work_date: date, transition: Transition) -> AttendanceRecord:
        """Read-modify-write of one day under a row lock.

        ``transition`` receives the locked current record (or None) and returns
        the record to persist. Exceptions raised by ``transition`` abort the
        write. A lost insert race raises ``ConcurrencyConflict``.
        """

        raise NotImplementedError
