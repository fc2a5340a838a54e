from __future__ import annotations

from decimal import Decimal

from ...core.exceptions import ConfigurationError
from .base import PayComputation, PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: worked_hours * (salary / standard_hours).

    The hourly rate is kept unrounded. Bonuses and deductions are not applied
    here; they are manual adjustments layered on the persisted record.
    """

    def compute(self, *, contracted_salary: Decimal, worked_hours: Decimal, standard_hours: Decimal) -> PayComputation:
        standard_hours = Decimal(standard_hours)
        if standard_hours <= 0:
            raise ConfigurationError("Standard hours for the period must be greater than zero")

        hourly_rate = Decimal(contracted_salary) / standard_hours
        net_salary = Decimal(worked_hours) * hourly_rate
        return PayComputation(standard_hours=standard_hours, hourly_rate=hourly_rate, net_salary=net_salary)
