from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..core import constants
from ..core.enums import Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .model import PayrollCalculation, PayrollRecord, PayrollSummary
from .repository import PayPeriodRepository, PayrollRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollProcessResult(OperationResult):
    employee_id: Optional[int] = None
    pay_period_id: Optional[int] = None
    created: bool = False
    calculation: Optional[PayrollCalculation] = None


class PayrollService:
    """Use case: one employee, one pay period -> one payroll record."""

    def __init__(
        self,
        employees: EmployeeRepository,
        pay_periods: PayPeriodRepository,
        payroll: PayrollRepository,
        calculator: PayrollCalculator,
        *,
        audit: AuditLog | None = None,
    ):
        self._employees = employees
        self._periods = pay_periods
        self._payroll = payroll
        self._calculator = calculator
        self._audit = audit or LoggingAuditLog()

    def process_employee_payroll(
        self,
        employee_id: int,
        pay_period_id: int,
        *,
        current_role: Role,
        actor_id: Optional[int] = None,
    ) -> PayrollProcessResult:
        """Compute and store the record. Re-processing an existing record is a successful no-op."""
        try:
            require_permission(current_role, Permission.PROCESS_PAYROLL)

            if self._payroll.get_for_employee_and_period(int(employee_id), int(pay_period_id)):
                logger.info("Payroll already exists for employee %s in period %s", employee_id, pay_period_id)
                return PayrollProcessResult.ok(
                    "Payroll already processed",
                    employee_id=int(employee_id),
                    pay_period_id=int(pay_period_id),
                )

            employee = self._employees.get_by_id(int(employee_id))
            if not employee:
                raise NotFoundError(f"Employee not found: {employee_id}")
            period = self._periods.get_by_id(int(pay_period_id))
            if not period:
                raise NotFoundError(f"Pay period not found: {pay_period_id}")

            calculation = self._calculator.calculate(employee, period)
            created = self._payroll.insert_if_absent(calculation)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("payroll", "process_employee", actor_id, FAILURE, employee_id, str(e)))
            return PayrollProcessResult.failed(e, employee_id=employee_id, pay_period_id=pay_period_id)

        if created:
            logger.info(
                "Payroll processed for employee %s in period %s: gross %s, net %s",
                employee_id,
                pay_period_id,
                calculation.gross_income,
                calculation.net_salary,
            )
        else:
            # lost the insert race to a concurrent run
            logger.info("Payroll already exists for employee %s in period %s", employee_id, pay_period_id)

        self._audit.record(AuditEvent("payroll", "process_employee", actor_id, SUCCESS, employee_id, f"period {pay_period_id}"))
        return PayrollProcessResult.ok(
            "Payroll processed" if created else "Payroll already processed",
            employee_id=int(employee_id),
            pay_period_id=int(pay_period_id),
            created=created,
            calculation=calculation,
        )

    # -------- Queries --------
    def payroll_for_period(self, pay_period_id: int) -> list[PayrollRecord]:
        return list(self._payroll.list_for_period(int(pay_period_id)))

    def employee_payroll_history(self, employee_id: int, limit: int = constants.DEFAULT_HISTORY_LIMIT) -> list[PayrollRecord]:
        return list(self._payroll.list_for_employee(int(employee_id), int(limit)))

    def payroll_summary(self, pay_period_id: int) -> PayrollSummary:
        return self._payroll.summary(int(pay_period_id))
