from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog
from ..common.validators import ranges_overlap, require_present
from ..core import constants
from ..core.enums import ApprovalStatus, FailureReason, Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError, ValidationError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from ..employees.repository import EmployeeRepository
from ..leave.model import LeaveBalance
from ..leave.repository import LeaveTypeRepository
from ..leave.service import LeaveBalanceTracker
from .model import LeaveRequest
from .repository import LeaveRequestRepository
from .workflow import RequestWorkflow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveSubmissionResult(OperationResult):
    request_id: Optional[int] = None
    employee_id: Optional[int] = None
    leave_days: int = 0


class LeaveRequestWorkflow(RequestWorkflow[LeaveRequest]):
    label = "Leave request"
    component = "leave_request"

    def __init__(
        self,
        requests: LeaveRequestRepository,
        leave_types: LeaveTypeRepository,
        tracker: LeaveBalanceTracker,
        employees: EmployeeRepository,
        *,
        max_advance_days: int = constants.LEAVE_MAX_ADVANCE_DAYS,
        max_backdate_days: int = constants.LEAVE_MAX_BACKDATE_DAYS,
        initialize_missing_balance: bool = False,
        audit: AuditLog | None = None,
    ):
        super().__init__(employees, audit=audit)
        self._requests = requests
        self._types = leave_types
        self._tracker = tracker
        self._max_advance_days = int(max_advance_days)
        self._max_backdate_days = int(max_backdate_days)
        self._initialize_missing_balance = bool(initialize_missing_balance)

    # -------- Submission --------
    def submit(
        self,
        employee_id: int,
        leave_type_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str = "",
        *,
        current_role: Role,
        today: date | None = None,
    ) -> LeaveSubmissionResult:
        today = today or datetime.now().date()

        try:
            require_permission(current_role, Permission.SUBMIT_REQUESTS)

            if not self._employees.get_by_id(int(employee_id)):
                raise NotFoundError(f"Employee not found: {employee_id}")
            if not self._types.get_by_id(int(leave_type_id)):
                raise NotFoundError(f"Leave type not found: {leave_type_id}")

            start_date = require_present(start_date, "Start date")
            end_date = require_present(end_date, "End date")
            self._validate(int(employee_id), int(leave_type_id), start_date, end_date, today)

            days = (end_date - start_date).days + 1
            request_id = self._requests.create(
                employee_id=int(employee_id),
                leave_type_id=int(leave_type_id),
                start_date=start_date,
                end_date=end_date,
                reason=(reason or "").strip(),
            )
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent(self.component, "submit", employee_id, FAILURE, None, str(e)))
            return LeaveSubmissionResult.failed(e, employee_id=employee_id)

        logger.info("Leave request %s submitted: employee %s, %s to %s (%s days)", request_id, employee_id, start_date, end_date, days)
        self._audit.record(AuditEvent(self.component, "submit", employee_id, SUCCESS, request_id))
        return LeaveSubmissionResult.ok(
            "Leave request submitted successfully",
            request_id=request_id,
            employee_id=int(employee_id),
            leave_days=days,
        )

    def _validate(self, employee_id: int, leave_type_id: int, start: date, end: date, today: date) -> None:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        if start > today + timedelta(days=self._max_advance_days):
            raise ValidationError(
                f"Leave requests cannot be submitted more than {self._max_advance_days} days in advance"
            )
        if start < today - timedelta(days=self._max_backdate_days):
            raise ValidationError(
                f"Leave requests cannot start more than {self._max_backdate_days} day(s) in the past"
            )

        days = (end - start).days + 1
        balance = self._tracker.get_balance(employee_id, leave_type_id, start.year)
        if balance is None and self._initialize_missing_balance:
            self._tracker.ensure_year(employee_id, start.year)
            balance = self._tracker.get_balance(employee_id, leave_type_id, start.year)
        # no balance row: nothing to check against
        if balance is not None and days > balance.remaining_days:
            raise ValidationError(
                f"Insufficient leave balance. Requested: {days} days, Available: {balance.remaining_days} days",
                reason=FailureReason.INSUFFICIENT_BALANCE,
            )

        for existing in self._requests.list_for_employee(employee_id):
            if existing.blocks_new_requests and ranges_overlap(start, end, existing.start_date, existing.end_date):
                raise ValidationError(
                    "Leave request overlaps with existing leave request",
                    reason=FailureReason.OVERLAP,
                )

    # -------- Approval hooks --------
    def _get(self, request_id: int) -> Optional[LeaveRequest]:
        return self._requests.get_by_id(request_id)

    def _decide(
        self,
        request_id: int,
        *,
        status: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> bool:
        return self._requests.decide(
            request_id=request_id,
            status=status,
            decided_by=approver_id,
            decided_at=now,
            supervisor_notes=notes,
        )

    def _balance_for(self, request: LeaveRequest) -> Optional[LeaveBalance]:
        """Balance row the request draws from; a missing year is allocated first."""
        year = request.start_date.year
        balance = self._tracker.get_balance(request.employee_id, request.leave_type_id, year)
        if balance is None:
            self._tracker.ensure_year(request.employee_id, year)
            balance = self._tracker.get_balance(request.employee_id, request.leave_type_id, year)
        return balance

    def _check_approvable(self, request: LeaveRequest) -> None:
        balance = self._balance_for(request)
        if balance is not None and request.days > balance.remaining_days:
            raise ValidationError(
                f"Insufficient leave balance. Requested: {request.days} days, Available: {balance.remaining_days} days",
                reason=FailureReason.INSUFFICIENT_BALANCE,
            )

    def _apply_approval(
        self,
        request: LeaveRequest,
        approver_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> dict[str, Any]:
        balance = self._tracker.get_balance(request.employee_id, request.leave_type_id, request.start_date.year)
        if balance is None:
            logger.warning(
                "No leave balance for employee %s, type %s, year %s; usage not recorded",
                request.employee_id,
                request.leave_type_id,
                request.start_date.year,
            )
            self._transition(request.request_id, ApprovalStatus.APPROVED, approver_id, notes, now)
            return {"leave_days": request.days}

        # status and usage are written together or not at all
        if not self._requests.approve_with_usage(
            request_id=request.request_id,
            decided_by=int(approver_id),
            decided_at=now,
            supervisor_notes=notes,
            balance_id=balance.balance_id,
            days=request.days,
        ):
            raise self._already_processed(request.request_id)

        logger.info("Committed %s leave days to balance %s", request.days, balance.balance_id)
        self._audit.record(
            AuditEvent("leave", "commit_usage", approver_id, SUCCESS, balance.balance_id, f"{request.days} days")
        )
        return {"leave_days": request.days}

    # -------- Queries --------
    def pending_requests(self) -> list[LeaveRequest]:
        return list(self._requests.list_pending())

    def requests_for_employee(self, employee_id: int) -> list[LeaveRequest]:
        return list(self._requests.list_for_employee(int(employee_id)))

    def requests_in_range(self, start_date: date, end_date: date) -> list[LeaveRequest]:
        return list(self._requests.list_in_range(start_date, end_date))
