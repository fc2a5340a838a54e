from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord


class PayrollRepository(Protocol):
    def upsert_computed(
        self,
        *,
        employee_id: int,
        month: str,
        year: int,
        base_salary: Decimal,
        total_hours: Decimal,
        net_salary: Decimal,
        payment_date: date,
    ) -> PayrollRecord:
        """Atomic insert-or-update keyed by (employee_id, month, year).

        New rows start PENDING with zero bonuses/deductions. Existing rows only
        get base_salary, total_hours, net_salary and payment_date replaced.
        """

        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_employee_period(self, employee_id: int, month: str, year: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def update_adjustments(
        self,
        *,
        payroll_id: int,
        bonuses: Optional[Decimal] = None,
        deductions: Optional[Decimal] = None,
        net_salary: Optional[Decimal] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Optional[PayrollRecord]:
        """Admin-only override in a single write; ``None`` keeps the stored value.

        Never touches total_hours or base_salary. Returns the record as stored
        after the write, or ``None`` when ``payroll_id`` does not exist.
        """

        raise NotImplementedError

    def list_history(self, employee_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        """Newest period first. ``employee_id=None`` means all employees."""

        raise NotImplementedError
