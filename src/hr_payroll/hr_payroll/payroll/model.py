from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import canonical_month_name, last_day_of_month, month_bounds, month_number, weekdays_in_month
from ..common.validators import require_year
from ..core.enums import PayrollStatus
from ..core.exceptions import PartialRunFailure


@dataclass(frozen=True)
class PayPeriod:
    """A (month, year) pay period. ``month`` is the canonical English name."""

    month: str
    year: int

    @classmethod
    def parse(cls, month: str, year: Any) -> "PayPeriod":
        return cls(month=canonical_month_name(month), year=require_year(year))

    @property
    def month_index(self) -> int:
        return month_number(self.month)

    @property
    def start(self) -> date:
        return month_bounds(self.year, self.month_index)[0]

    @property
    def end(self) -> date:
        return month_bounds(self.year, self.month_index)[1]

    @property
    def payment_date(self) -> date:
        """Last calendar day of the month, independent of attendance."""
        return last_day_of_month(self.year, self.month_index)

    @property
    def weekday_count(self) -> int:
        return weekdays_in_month(self.year, self.month_index)

    def standard_hours(self, hours_per_day: int) -> int:
        return self.weekday_count * int(hours_per_day)


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's payroll for one period."""

    payroll_id: int
    employee_id: int
    month: str
    year: int
    base_salary: Decimal
    total_hours: Decimal
    bonuses: Decimal
    deductions: Decimal
    net_salary: Decimal
    status: PayrollStatus
    payment_date: date
    employee_name: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class RunResult:
    """Outcome of one payroll run; failures are per employee, never global."""

    month: str
    year: int
    processed: int
    processed_ids: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    errors: dict[int, str] = field(default_factory=dict)
    skipped: list[int] = field(default_factory=list)
    cancelled: bool = False

    def raise_for_failures(self) -> None:
        if self.failed:
            raise PartialRunFailure(
                f"Payroll {self.month} {self.year}: {len(self.failed)} employee(s) failed",
                failed=self.failed,
            )
