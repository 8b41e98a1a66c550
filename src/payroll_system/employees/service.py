from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..common.money import round_money, to_decimal
from ..core.enums import Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError, ValidationError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryUpdateResult(OperationResult):
    employee_id: Optional[int] = None
    basic_salary: Decimal = Decimal("0.00")
    hourly_rate: Decimal = Decimal("0.00")


class EmployeeService:
    """Use case: explicit salary updates (the only way salary inputs change)."""

    def __init__(self, employees: EmployeeRepository, *, audit: AuditLog | None = None):
        self._employees = employees
        self._audit = audit or LoggingAuditLog()

    def update_salary(
        self,
        *,
        current_role: Role,
        actor_id: int,
        employee_id: int,
        basic_salary: Decimal | str,
        hourly_rate: Decimal | str,
    ) -> SalaryUpdateResult:
        try:
            require_permission(current_role, Permission.MANAGE_EMPLOYEES)

            basic = round_money(to_decimal(basic_salary))
            rate = round_money(to_decimal(hourly_rate))
            if basic < 0 or rate < 0:
                raise ValidationError("Salary and hourly rate cannot be negative")

            if not self._employees.get_by_id(int(employee_id)):
                raise NotFoundError(f"Employee not found: {employee_id}")

            if not self._employees.update_salary(int(employee_id), basic_salary=basic, hourly_rate=rate):
                raise StorageError(f"Salary update affected no rows for employee {employee_id}")
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("employees", "update_salary", actor_id, FAILURE, employee_id, str(e)))
            return SalaryUpdateResult.failed(e, employee_id=employee_id)

        logger.info("Salary updated for employee %s", employee_id)
        self._audit.record(AuditEvent("employees", "update_salary", actor_id, SUCCESS, employee_id))
        return SalaryUpdateResult.ok(
            "Salary updated",
            employee_id=int(employee_id),
            basic_salary=basic,
            hourly_rate=rate,
        )
