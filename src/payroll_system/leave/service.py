from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..core.enums import Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError, ValidationError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from .model import LeaveBalance, LeaveSummary
from .repository import LeaveBalanceRepository, LeaveTypeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceInitResult(OperationResult):
    employee_id: Optional[int] = None
    year: Optional[int] = None
    created: int = 0


class LeaveBalanceTracker:
    """Leave balance arithmetic: yearly allocation and usage."""

    def __init__(
        self,
        leave_types: LeaveTypeRepository,
        balances: LeaveBalanceRepository,
        *,
        audit: AuditLog | None = None,
    ):
        self._types = leave_types
        self._balances = balances
        self._audit = audit or LoggingAuditLog()

    def initialize_year(
        self,
        employee_id: int,
        year: int,
        *,
        current_role: Role,
        actor_id: Optional[int] = None,
    ) -> BalanceInitResult:
        try:
            require_permission(current_role, Permission.MANAGE_LEAVE_BALANCES)
            created = self.ensure_year(employee_id, year)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("leave", "initialize_year", actor_id, FAILURE, employee_id, str(e)))
            return BalanceInitResult.failed(e, employee_id=employee_id, year=year)

        return BalanceInitResult.ok(
            f"Leave balances initialized for {year} ({created} created)",
            employee_id=int(employee_id),
            year=int(year),
            created=created,
        )

    def ensure_year(self, employee_id: int, year: int) -> int:
        """Create any missing balance rows for the year; idempotent. Returns rows created."""
        created = 0
        for leave_type in self._types.list_all():
            if self._balances.get(int(employee_id), leave_type.leave_type_id, int(year)):
                continue
            if self._balances.create_if_absent(
                employee_id=int(employee_id),
                leave_type_id=leave_type.leave_type_id,
                year=int(year),
                total_days=leave_type.default_allocation,
            ):
                created += 1

        if created:
            logger.info("Initialized %s leave balances for employee %s, year %s", created, employee_id, year)
            self._audit.record(
                AuditEvent("leave", "initialize_year", None, SUCCESS, employee_id, f"{created} balances for {year}")
            )
        return created

    def commit_usage(self, balance_id: int, days_used: int) -> None:
        if int(days_used) <= 0:
            raise ValidationError("Days used must be positive")
        if not self._balances.add_used_days(balance_id=int(balance_id), days=int(days_used)):
            raise NotFoundError(f"Leave balance not found: {balance_id}")

        logger.info("Committed %s leave days to balance %s", days_used, balance_id)
        self._audit.record(AuditEvent("leave", "commit_usage", None, SUCCESS, balance_id, f"{days_used} days"))

    # -------- Queries --------
    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        return self._balances.get(int(employee_id), int(leave_type_id), int(year))

    def balances_for_year(self, employee_id: int, year: int) -> list[LeaveBalance]:
        return list(self._balances.list_for_employee(int(employee_id), int(year)))

    def leave_summary(self, employee_id: int, year: int) -> LeaveSummary:
        return LeaveSummary(
            employee_id=int(employee_id),
            year=int(year),
            balances=self.balances_for_year(employee_id, year),
        )
