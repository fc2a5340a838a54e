from __future__ import annotations

import threading
from datetime import date, datetime, timedelta

import pytest

from src.hr_payroll.hr_payroll.attendance.service import AttendanceService
from src.hr_payroll.hr_payroll.core.enums import DayStatus
from src.hr_payroll.hr_payroll.core.exceptions import ConcurrencyConflict, RecordNotFound, ValidationError


def test_clock_in_creates_todays_record(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)

    rec = svc.clock_in(2, now=fixed_now)

    assert rec is not None
    assert rec.attendance_id is not None
    assert rec.status == DayStatus.CLOCKED_IN
    assert svc.get_today(2, today=fixed_now.date()) == rec


def test_second_clock_in_leaves_record_unchanged(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)

    first = svc.clock_in(2, now=fixed_now)
    second = svc.clock_in(2, now=fixed_now + timedelta(minutes=2))

    assert second == first
    assert attendance_repo.writes == 1


def test_two_buttons_drive_all_four_transitions(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)

    assert svc.clock_in(2, now=fixed_now).status == DayStatus.CLOCKED_IN
    assert svc.clock_out(2, now=fixed_now + timedelta(hours=3)).status == DayStatus.ON_BREAK
    assert svc.clock_in(2, now=fixed_now + timedelta(hours=3, minutes=30)).status == DayStatus.BACK_FROM_BREAK
    done = svc.clock_out(2, now=fixed_now + timedelta(hours=8))
    assert done.status == DayStatus.CLOCKED_OUT

    assert svc.clock_in(2, now=fixed_now + timedelta(hours=9)) == done
    assert svc.clock_out(2, now=fixed_now + timedelta(hours=9)) == done


def test_clock_out_before_clock_in_returns_none(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)

    assert svc.clock_out(2, now=fixed_now) is None
    assert svc.get_today(2, today=fixed_now.date()) is None


def test_unknown_employee_is_rejected(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)

    with pytest.raises(RecordNotFound):
        svc.clock_in(999, now=fixed_now)


def test_history_is_newest_first_and_limited(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)
    for offset in range(5):
        svc.clock_in(2, now=fixed_now - timedelta(days=offset))

    rows = svc.get_history(2, limit=3)

    assert [r.work_date for r in rows] == [
        fixed_now.date(),
        fixed_now.date() - timedelta(days=1),
        fixed_now.date() - timedelta(days=2),
    ]

    with pytest.raises(ValidationError):
        svc.get_history(2, limit=0)


def test_concurrent_taps_transition_once(attendance_repo, employees, fixed_now):
    svc = AttendanceService(attendance_repo, employees)
    svc.clock_in(2, now=fixed_now)

    barrier = threading.Barrier(8)
    results = []

    def tap():
        barrier.wait()
        results.append(svc.clock_out(2, now=fixed_now + timedelta(hours=3)))

    threads = [threading.Thread(target=tap) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    rec = svc.get_today(2, today=fixed_now.date())
    # Exactly one CLOCKED_IN -> ON_BREAK transition; the others saw ON_BREAK and did nothing.
    assert rec.status == DayStatus.ON_BREAK
    assert attendance_repo.writes == 2
    assert all(r.status == DayStatus.ON_BREAK for r in results)


class FlakyAttendance:
    """Raises ConcurrencyConflict for the first ``conflicts`` writes."""

    def __init__(self, inner, conflicts: int):
        self._inner = inner
        self._conflicts = conflicts
        self.calls = 0

    def apply_transition(self, **kwargs):
        self.calls += 1
        if self.calls <= self._conflicts:
            raise ConcurrencyConflict("lost the insert race")
        return self._inner.apply_transition(**kwargs)

    def __getattr__(self, name):
        return getattr(self._inner, name)


def test_conflict_is_retried_with_a_fresh_read(attendance_repo, employees, fixed_now):
    flaky = FlakyAttendance(attendance_repo, conflicts=1)
    svc = AttendanceService(flaky, employees, retry_attempts=3)

    rec = svc.clock_in(2, now=fixed_now)

    assert rec.status == DayStatus.CLOCKED_IN
    assert flaky.calls == 2


def test_persistent_conflict_propagates(attendance_repo, employees, fixed_now):
    flaky = FlakyAttendance(attendance_repo, conflicts=10)
    svc = AttendanceService(flaky, employees, retry_attempts=3)

    with pytest.raises(ConcurrencyConflict):
        svc.clock_in(2, now=fixed_now)
    assert flaky.calls == 3


def test_default_clock_is_used_when_now_missing(attendance_repo, employees):
    moment = datetime(2025, 5, 2, 8, 30)
    svc = AttendanceService(attendance_repo, employees, clock=lambda: moment)

    rec = svc.clock_in(3)

    assert rec.work_date == date(2025, 5, 2)
    assert svc.get_today(3) == rec
