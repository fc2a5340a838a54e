from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    ``status`` is not stored on the entity; it is derived from which
    timestamps are populated, so the two can never disagree.
    """

    attendance_id: Optional[int]
    employee_id: int
    work_date: date
    clock_in_time: datetime
    break_start_time: Optional[datetime] = None
    break_end_time: Optional[datetime] = None
    clock_out_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.break_end_time is not None and self.break_start_time is None:
            raise ValidationError("break_end_time requires break_start_time")

        previous = self.clock_in_time
        for value in (self.break_start_time, self.break_end_time, self.clock_out_time):
            if value is None:
                continue
            if value < previous:
                raise ValidationError("Attendance timestamps must not go backwards")
            previous = value

    @property
    def status(self) -> DayStatus:
        if self.clock_out_time is not None:
            return DayStatus.CLOCKED_OUT
        if self.break_end_time is not None:
            return DayStatus.BACK_FROM_BREAK
        if self.break_start_time is not None:
            return DayStatus.ON_BREAK
        return DayStatus.CLOCKED_IN

    @property
    def is_open(self) -> bool:
        return self.clock_out_time is None
