"""Time-window aggregation of attendance into worked hours."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import OpenRecordPolicy
from ..core.exceptions import ValidationError

_SECONDS_PER_MINUTE = Decimal(60)
_SECONDS_PER_HOUR = Decimal(3600)


class TimeWindowAggregator:
    """Net worked time = (clock_out or now) - clock_in - (break_end - break_start).

    The break is only subtracted when both ends are present. Durations are
    summed in whole seconds and only converted to hours at the end. Open records
    (no clock_out) are handled according to ``open_policy``: ``NOW`` counts up
    to ``now``, ``ZERO`` counts nothing, ``REJECT`` raises ``ValidationError``.
    """

    def __init__(self, *, open_policy: OpenRecordPolicy = OpenRecordPolicy.NOW):
        self._open_policy = OpenRecordPolicy(open_policy)

    @property
    def open_policy(self) -> OpenRecordPolicy:
        return self._open_policy

    def worked_seconds(self, record: AttendanceRecord, *, now: datetime) -> int:
        end = record.clock_out_time
        if end is None:
            if self._open_policy == OpenRecordPolicy.ZERO:
                return 0
            if self._open_policy == OpenRecordPolicy.REJECT:
                raise ValidationError(
                    f"Attendance of employee {record.employee_id} on {record.work_date} is still open"
                )
            end = now

        worked = end - record.clock_in_time
        if record.break_start_time is not None and record.break_end_time is not None:
            worked -= record.break_end_time - record.break_start_time

        return max(int(worked.total_seconds()), 0)

    def worked_minutes(self, record: AttendanceRecord, *, now: datetime) -> Decimal:
        return Decimal(self.worked_seconds(record, now=now)) / _SECONDS_PER_MINUTE

    def total_seconds(
        self,
        records: Iterable[AttendanceRecord],
        *,
        now: datetime,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        total = 0
        for r in records:
            if start is not None and r.work_date < start:
                continue
            if end is not None and r.work_date > end:
                continue
            total += self.worked_seconds(r, now=now)
        return total

    def total_hours(
        self,
        records: Iterable[AttendanceRecord],
        *,
        now: datetime,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Decimal:
        """Unrounded hours; rounding happens at persistence/display."""
        return Decimal(self.total_seconds(records, now=now, start=start, end=end)) / _SECONDS_PER_HOUR

    def hours_by_employee(
        self,
        records: Iterable[AttendanceRecord],
        *,
        now: datetime,
        start: date,
        end: date,
    ) -> dict[int, Decimal]:
        seconds: dict[int, int] = defaultdict(int)
        for r in records:
            if start <= r.work_date <= end:
                seconds[r.employee_id] += self.worked_seconds(r, now=now)
        return {emp_id: Decimal(s) / _SECONDS_PER_HOUR for emp_id, s in seconds.items()}
