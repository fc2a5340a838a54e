from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import CLOCK_RETRY_ATTEMPTS, DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ConcurrencyConflict, RecordNotFound, ValidationError
from ..employees.repository import EmployeeDirectory
from . import state_machine
from .model import AttendanceRecord
from .repository import AttendanceRepository, Transition

logger = logging.getLogger(__name__)


class AttendanceService:
    """Clock actions and attendance reads for the employee-facing API.

    Only two write operations exist; which of the four transitions applies is
    decided by the state machine from the locked current record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory | None = None,
        *,
        clock: Callable[[], datetime] = now_local,
        retry_attempts: int = CLOCK_RETRY_ATTEMPTS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock
        self._retry_attempts = max(1, int(retry_attempts))

    def _require_employee(self, employee_id: int) -> None:
        if self._employees is None:
            return
        if not self._employees.get_employee(employee_id):
            raise RecordNotFound(f"Employee {employee_id} not found")

    def _apply(self, employee_id: int, work_date: date, transition: Transition, action: str) -> Optional[AttendanceRecord]:
        for attempt in range(1, self._retry_attempts + 1):
            try:
                record = self._attendance.apply_transition(
                    employee_id=employee_id,
                    work_date=work_date,
                    transition=transition,
                )
            except state_machine.NoOpTransition as e:
                logger.debug("[attendance] %s ignored for employee_id=%s: %s", action, employee_id, e)
                return e.record
            except ConcurrencyConflict:
                if attempt >= self._retry_attempts:
                    raise
                logger.warning(
                    "[attendance] %s conflict for employee_id=%s on %s, retrying (%s/%s)",
                    action, employee_id, work_date, attempt, self._retry_attempts,
                )
                continue

            logger.info(
                "[attendance] %s employee_id=%s date=%s -> %s",
                action, employee_id, work_date, record.status.value,
            )
            return record
        return None

    def clock_in(self, employee_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        """Start the day, or come back from break. Other states: record unchanged."""
        now = now or self._clock()
        self._require_employee(employee_id)
        return self._apply(
            employee_id,
            now.date(),
            lambda current: state_machine.clock_in(current, employee_id=employee_id, now=now),
            "clock_in",
        )

    def clock_out(self, employee_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        """Start the break, or end the day. Other states: record unchanged (None if no record)."""
        now = now or self._clock()
        self._require_employee(employee_id)
        return self._apply(
            employee_id,
            now.date(),
            lambda current: state_machine.clock_out(current, now=now),
            "clock_out",
        )

    def get_today(self, employee_id: int, *, today: date | None = None) -> Optional[AttendanceRecord]:
        today = today or self._clock().date()
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        if int(limit) <= 0:
            raise ValidationError("limit must be a positive integer")
        return self._attendance.get_recent_for_employee(employee_id, int(limit))
