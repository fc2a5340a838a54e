from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeDirectory(Protocol):
    """Interface to the external employee directory.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(self, role: Optional[Role] = None) -> Sequence[Employee]:
        raise NotImplementedError
