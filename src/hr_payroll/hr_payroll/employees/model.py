from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Read-only view of the employee directory (owned by another service)."""

    employee_id: int
    full_name: str
    role: Role
    contracted_monthly_salary: Decimal
    department: Optional[str] = None
