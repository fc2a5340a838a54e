"""Clock state machine for a single (employee, day).

The UI offers one "clock" button; the intent is inferred from the current
state, never from a client-supplied action name:

    (no record)      --clock_in-->  CLOCKED_IN        clock_in_time
    CLOCKED_IN       --clock_out--> ON_BREAK          break_start_time
    ON_BREAK         --clock_in-->  BACK_FROM_BREAK   break_end_time
    BACK_FROM_BREAK  --clock_out--> CLOCKED_OUT       clock_out_time

Every other combination raises ``InvalidTransition`` carrying the current
record. CLOCKED_OUT is terminal.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import DayStatus
from ..core.exceptions import InvalidTransition
from .model import AttendanceRecord


class NoOpTransition(InvalidTransition):
    def __init__(self, record: Optional[AttendanceRecord], action: str):
        state = record.status.value if record else "NO_RECORD"
        super().__init__(f"{action} ignored in state {state}")
        self.record = record
        self.action = action


def clock_in(current: Optional[AttendanceRecord], *, employee_id: int, now: datetime) -> AttendanceRecord:
    if current is None:
        return AttendanceRecord(
            attendance_id=None,
            employee_id=employee_id,
            work_date=now.date(),
            clock_in_time=now,
        )
    if current.status == DayStatus.ON_BREAK:
        return replace(current, break_end_time=now)
    raise NoOpTransition(current, "clock_in")


def clock_out(current: Optional[AttendanceRecord], *, now: datetime) -> AttendanceRecord:
    if current is None:
        raise NoOpTransition(None, "clock_out")
    if current.status == DayStatus.CLOCKED_IN:
        return replace(current, break_start_time=now)
    if current.status == DayStatus.BACK_FROM_BREAK:
        return replace(current, clock_out_time=now)
    raise NoOpTransition(current, "clock_out")
