from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..common.money import ZERO
from ..core.enums import EmployeeStatus, Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from ..employees.repository import EmployeeRepository
from .repository import PayPeriodRepository
from .service import PayrollService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollBatchResult(OperationResult):
    pay_period_id: Optional[int] = None
    processed_date: Optional[date] = None
    total_employees: int = 0
    processed_employees: int = 0
    failed_employees: int = 0
    errors: tuple[str, ...] = ()
    fatal_error: Optional[str] = None
    total_gross_income: Decimal = ZERO
    total_net_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_benefits: Decimal = ZERO


class PayrollBatchProcessor:
    """Runs PayrollService over every active employee, one at a time.

    A failure for one employee is recorded and the run continues. Failing to
    list the roster aborts the run with ``fatal_error`` set.
    """

    def __init__(
        self,
        payroll: PayrollService,
        employees: EmployeeRepository,
        pay_periods: PayPeriodRepository,
        *,
        audit: AuditLog | None = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._periods = pay_periods
        self._audit = audit or LoggingAuditLog()

    def process_payroll_for_period(
        self,
        pay_period_id: int,
        *,
        current_role: Role,
        actor_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> PayrollBatchResult:
        now = now or datetime.now()
        today = now.date()

        try:
            require_permission(current_role, Permission.PROCESS_PAYROLL)
            if not self._periods.get_by_id(int(pay_period_id)):
                raise NotFoundError(f"Pay period not found: {pay_period_id}")
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("payroll", "batch", actor_id, FAILURE, pay_period_id, str(e)))
            return PayrollBatchResult.failed(e, pay_period_id=pay_period_id, processed_date=today, errors=(str(e),))

        try:
            roster = list(self._employees.list_by_status(EmployeeStatus.ACTIVE))
        except Exception as e:
            logger.exception("Fatal error listing employees for pay period %s", pay_period_id)
            self._audit.record(AuditEvent("payroll", "batch", actor_id, FAILURE, pay_period_id, str(e)))
            return PayrollBatchResult(
                success=False,
                message="Fatal error during payroll processing",
                reason=getattr(e, "reason", None),
                pay_period_id=int(pay_period_id),
                processed_date=today,
                errors=(f"Fatal error during payroll processing: {e}",),
                fatal_error=str(e),
            )

        logger.info("Processing payroll for %s employees in pay period %s", len(roster), pay_period_id)
        self._audit.record(AuditEvent("payroll", "batch_start", actor_id, SUCCESS, pay_period_id, f"{len(roster)} employees"))

        processed = 0
        errors: list[str] = []
        for employee in roster:
            try:
                result = self._payroll.process_employee_payroll(
                    employee.employee_id,
                    pay_period_id,
                    current_role=current_role,
                    actor_id=actor_id,
                )
            except Exception as e:
                logger.exception("Error processing payroll for employee %s", employee.employee_id)
                errors.append(f"Error processing employee {employee.employee_id}: {e}")
                continue

            if result.success:
                processed += 1
            else:
                errors.append(f"Failed to process payroll for employee {employee.employee_id}: {result.message}")

        totals = {}
        try:
            summary = self._payroll.payroll_summary(pay_period_id)
            totals = dict(
                total_gross_income=summary.total_gross_income,
                total_net_salary=summary.total_net_salary,
                total_deductions=summary.total_deductions,
                total_benefits=summary.total_benefits,
            )
        except StorageError:
            logger.exception("Error calculating payroll summary for pay period %s", pay_period_id)

        failed = len(errors)
        logger.info("Payroll processing completed. Success: %s, Failed: %s", processed, failed)
        self._audit.record(
            AuditEvent(
                "payroll",
                "batch_finish",
                actor_id,
                SUCCESS if failed == 0 else FAILURE,
                pay_period_id,
                f"processed={processed} failed={failed}",
            )
        )
        return PayrollBatchResult(
            success=failed == 0,
            message=f"Processed {processed} of {len(roster)} employees",
            pay_period_id=int(pay_period_id),
            processed_date=today,
            total_employees=len(roster),
            processed_employees=processed,
            failed_employees=failed,
            errors=tuple(errors),
            **totals,
        )
