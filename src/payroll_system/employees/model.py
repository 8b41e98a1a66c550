from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object (no DB access). Salary inputs change only through
    ``EmployeeService.update_salary``.
    """

    employee_id: int
    full_name: str
    basic_salary: Decimal
    hourly_rate: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    role: Role = Role.EMPLOYEE
    supervisor_id: Optional[int] = None
    position_id: Optional[int] = None
    department_id: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
