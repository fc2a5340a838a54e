from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of the caller, used for access checks."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class DayStatus(str, Enum):
    """Attendance state of one employee for one calendar day."""

    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"
    BACK_FROM_BREAK = "BACK_FROM_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class OpenRecordPolicy(str, Enum):
    """How a payroll run treats a day that was clocked in but never closed."""

    ZERO = "zero"
    NOW = "now"
    REJECT = "reject"
