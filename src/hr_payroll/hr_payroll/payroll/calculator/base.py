from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PayComputation:
    standard_hours: Decimal
    hourly_rate: Decimal
    net_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, *, contracted_salary: Decimal, worked_hours: Decimal, standard_hours: Decimal) -> PayComputation:
        raise NotImplementedError
