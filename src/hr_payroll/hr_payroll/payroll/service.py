from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.money import quantize_money
from ..common.validators import require_non_negative
from ..core.constants import DEFAULT_PAYROLL_MAX_WORKERS
from ..core.enums import OpenRecordPolicy, PayrollStatus, Role
from ..core.exceptions import AuthorizationError, ConcurrencyConflict, ConfigurationError, RecordNotFound, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeDirectory
from ..settings.service import SettingsService
from .aggregator import TimeWindowAggregator
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayPeriod, PayrollRecord, RunResult
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollRunConfig:
    """Configuration snapshot taken once at the start of a run."""

    hours_per_day: int
    standard_hours: int
    open_policy: OpenRecordPolicy
    now: datetime


_SKIPPED = object()


class PayrollRunService:
    def __init__(
        self,
        payroll: PayrollRepository,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        settings: SettingsService,
        *,
        calculator: Optional[PayrollCalculator] = None,
        open_policy: OpenRecordPolicy = OpenRecordPolicy.ZERO,
        max_workers: int = DEFAULT_PAYROLL_MAX_WORKERS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._attendance = attendance
        self._employees = employees
        self._settings = settings
        self._calculator = calculator or StandardPayrollCalculator()
        self._open_policy = OpenRecordPolicy(open_policy)
        self._max_workers = max(1, int(max_workers))
        self._clock = clock

        self._runs_lock = threading.Lock()
        self._active_runs: dict[tuple[str, int], threading.Event] = {}

    def _resolve_config(self, period: PayPeriod) -> PayrollRunConfig:
        hours_per_day = self._settings.resolve_standard_hours()
        standard_hours = period.standard_hours(hours_per_day)
        if standard_hours <= 0:
            raise ConfigurationError(f"Standard hours for {period.month} {period.year} resolve to zero")
        return PayrollRunConfig(
            hours_per_day=hours_per_day,
            standard_hours=standard_hours,
            open_policy=self._open_policy,
            now=self._clock(),
        )

    def run_payroll(self, month: str, year: Any, *, cancel_event: Optional[threading.Event] = None) -> RunResult:
        """Compute and upsert one payroll record per EMPLOYEE for the period.

        Configuration errors abort before any write. Failures of individual
        employees are collected in the result; the rest of the batch proceeds.
        """

        period = PayPeriod.parse(month, year)
        config = self._resolve_config(period)
        cancel = cancel_event or threading.Event()

        key = (period.month, period.year)
        with self._runs_lock:
            if key in self._active_runs:
                raise ConcurrencyConflict(f"Payroll for {period.month} {period.year} is already running")
            self._active_runs[key] = cancel

        try:
            staff = list(self._employees.list_employees(Role.EMPLOYEE))
            logger.info(
                "[payroll] run %s %s: employees=%s standard_hours=%s (%s h/day) policy=%s",
                period.month, period.year, len(staff), config.standard_hours,
                config.hours_per_day, config.open_policy.value,
            )

            aggregator = TimeWindowAggregator(open_policy=config.open_policy)

            def job(emp: Employee):
                if cancel.is_set():
                    return _SKIPPED
                return self._process_employee(emp, period=period, config=config, aggregator=aggregator)

            processed: list[int] = []
            failed: list[int] = []
            errors: dict[int, str] = {}
            skipped: list[int] = []

            with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="payroll") as pool:
                futures = [(emp, pool.submit(job, emp)) for emp in staff]
                for emp, fut in futures:
                    try:
                        outcome = fut.result()
                    except Exception as e:
                        logger.exception("[payroll] employee_id=%s failed for %s %s", emp.employee_id, period.month, period.year)
                        failed.append(emp.employee_id)
                        errors[emp.employee_id] = str(e) or e.__class__.__name__
                        continue
                    if outcome is _SKIPPED:
                        skipped.append(emp.employee_id)
                    else:
                        processed.append(emp.employee_id)
        finally:
            with self._runs_lock:
                self._active_runs.pop(key, None)

        result = RunResult(
            month=period.month,
            year=period.year,
            processed=len(processed),
            processed_ids=processed,
            failed=failed,
            errors=errors,
            skipped=skipped,
            cancelled=cancel.is_set(),
        )
        logger.info(
            "[payroll] run %s %s done: processed=%s failed=%s skipped=%s cancelled=%s",
            period.month, period.year, result.processed, len(failed), len(skipped), result.cancelled,
        )
        return result

    def _process_employee(
        self,
        emp: Employee,
        *,
        period: PayPeriod,
        config: PayrollRunConfig,
        aggregator: TimeWindowAggregator,
    ) -> PayrollRecord:
        records = self._attendance.get_for_employee_between(emp.employee_id, period.start, period.end)
        worked_hours = aggregator.total_hours(records, now=config.now, start=period.start, end=period.end)

        salary = Decimal(emp.contracted_monthly_salary or 0)
        pay = self._calculator.compute(
            contracted_salary=salary,
            worked_hours=worked_hours,
            standard_hours=Decimal(config.standard_hours),
        )

        return self._payroll.upsert_computed(
            employee_id=emp.employee_id,
            month=period.month,
            year=period.year,
            base_salary=quantize_money(salary),
            total_hours=quantize_money(worked_hours),
            net_salary=quantize_money(pay.net_salary),
            payment_date=period.payment_date,
        )

    def cancel_run(self, month: str, year: Any) -> bool:
        """Ask a running payroll to stop. Already upserted records stay."""

        period = PayPeriod.parse(month, year)
        with self._runs_lock:
            event = self._active_runs.get((period.month, period.year))
        if event is None:
            return False
        event.set()
        logger.info("[payroll] cancel requested for %s %s", period.month, period.year)
        return True

    def get_payroll_history(
        self,
        *,
        current_employee_id: int,
        current_role: Role,
        employee_id: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        """Admins see everybody (or one employee); employees only see themselves."""

        if current_role == Role.ADMIN:
            return self._payroll.list_history(employee_id)
        if employee_id is not None and int(employee_id) != int(current_employee_id):
            raise AuthorizationError("Employees can only view their own payroll")
        return self._payroll.list_history(int(current_employee_id))

    def update_payroll_record(
        self,
        payroll_id: int,
        *,
        current_role: Role,
        bonuses: Any = None,
        deductions: Any = None,
        net_salary: Any = None,
        status: Any = None,
    ) -> PayrollRecord:
        """Replace bonuses/deductions/net_salary/status; omitted fields keep their value.

        net_salary is taken as given, it is not recomputed from bonuses and
        deductions.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can adjust payroll")

        new_bonuses = None if bonuses is None else quantize_money(require_non_negative(bonuses, "bonuses"))
        new_deductions = None if deductions is None else quantize_money(require_non_negative(deductions, "deductions"))
        new_net = None if net_salary is None else quantize_money(require_non_negative(net_salary, "netSalary"))
        new_status = None
        if status is not None:
            try:
                new_status = PayrollStatus(str(status).upper())
            except ValueError:
                raise ValidationError(f"Invalid payroll status: {status!r}")

        updated = self._payroll.update_adjustments(
            payroll_id=payroll_id,
            bonuses=new_bonuses,
            deductions=new_deductions,
            net_salary=new_net,
            status=new_status,
        )
        if not updated:
            raise RecordNotFound(f"Payroll record {payroll_id} not found")

        logger.info(
            "[payroll] payroll_id=%s adjusted: bonuses=%s deductions=%s net=%s status=%s",
            payroll_id, updated.bonuses, updated.deductions, updated.net_salary, updated.status.value,
        )
        return updated
