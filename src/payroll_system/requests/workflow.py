"""Approval state machine shared by leave and overtime requests.

    Pending --approve--> Approved
    Pending --reject---> Rejected

Both end states are final. The transition itself is a conditional update
guarded by ``status = Pending``, so two concurrent deciders cannot both win.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, Optional, TypeVar

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..common.money import ZERO
from ..core.enums import ApprovalStatus, FailureReason, Permission, Role
from ..core.exceptions import (
    AlreadyProcessedError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..core.permissions import has_permission
from ..core.results import OperationResult
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DecisionResult(OperationResult):
    request_id: Optional[int] = None
    status: Optional[ApprovalStatus] = None
    approver_id: Optional[int] = None
    leave_days: int = 0
    overtime_hours: Decimal = ZERO
    overtime_pay: Decimal = ZERO


class RequestWorkflow(ABC, Generic[T]):
    """Template Method: approve/reject are fixed, request kinds fill in the hooks."""

    #: Used in messages and audit events ("Leave request ...").
    label = "Request"
    component = "requests"

    def __init__(self, employees: EmployeeRepository, *, audit: AuditLog | None = None):
        self._employees = employees
        self._audit = audit or LoggingAuditLog()

    # -------- Hooks --------
    @abstractmethod
    def _get(self, request_id: int) -> Optional[T]:
        raise NotImplementedError

    @abstractmethod
    def _decide(
        self,
        request_id: int,
        *,
        status: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> bool:
        raise NotImplementedError

    def _check_approvable(self, request: T) -> None:
        """Re-check business rules at approval time. Raise to refuse."""

    def _on_approved(self, request: T, *, now: datetime) -> dict[str, Any]:
        """Side effects after the transition; returns extra result payload."""
        return {}

    def _apply_approval(
        self,
        request: T,
        approver_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> dict[str, Any]:
        """Move the request to Approved. Override when the transition must carry other writes."""
        self._transition(request.request_id, ApprovalStatus.APPROVED, approver_id, notes, now)
        return self._on_approved(request, now=now)

    # -------- Transitions --------
    def approve(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> DecisionResult:
        now = now or datetime.now()
        notes = (notes or "").strip() or None

        try:
            request = self._load_for_decision(request_id, approver_id, current_role)
            self._check_approvable(request)
            payload = self._apply_approval(request, approver_id, notes, now)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent(self.component, "approve", approver_id, FAILURE, request_id, str(e)))
            return DecisionResult.failed(e, request_id=request_id, approver_id=approver_id)

        logger.info("%s %s approved by %s", self.label, request_id, approver_id)
        self._audit.record(AuditEvent(self.component, "approve", approver_id, SUCCESS, request_id))
        return DecisionResult.ok(
            f"{self.label} approved successfully",
            request_id=int(request_id),
            status=ApprovalStatus.APPROVED,
            approver_id=int(approver_id),
            **payload,
        )

    def reject(
        self,
        request_id: int,
        approver_id: int,
        *,
        current_role: Role,
        notes: Optional[str],
        now: datetime | None = None,
    ) -> DecisionResult:
        now = now or datetime.now()

        try:
            notes = (notes or "").strip()
            if not notes:
                raise ValidationError(
                    f"Supervisor notes are required when rejecting {self._label_with_article}",
                    reason=FailureReason.MISSING_REASON,
                )
            self._load_for_decision(request_id, approver_id, current_role)
            self._transition(request_id, ApprovalStatus.REJECTED, approver_id, notes, now)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent(self.component, "reject", approver_id, FAILURE, request_id, str(e)))
            return DecisionResult.failed(e, request_id=request_id, approver_id=approver_id)

        logger.info("%s %s rejected by %s", self.label, request_id, approver_id)
        self._audit.record(AuditEvent(self.component, "reject", approver_id, SUCCESS, request_id, notes))
        return DecisionResult.ok(
            f"{self.label} rejected successfully",
            request_id=int(request_id),
            status=ApprovalStatus.REJECTED,
            approver_id=int(approver_id),
        )

    @property
    def _label_with_article(self) -> str:
        label = self.label.lower()
        return f"an {label}" if label[:1] in "aeiou" else f"a {label}"

    # -------- Shared steps --------
    def _load_for_decision(self, request_id: int, approver_id: int, current_role: Role) -> T:
        if not (
            has_permission(current_role, Permission.APPROVE_ALL_REQUESTS)
            or has_permission(current_role, Permission.APPROVE_TEAM_REQUESTS)
        ):
            raise AuthorizationError(f"Role '{Role(current_role).value}' cannot decide requests")

        request = self._get(int(request_id))
        if not request:
            raise NotFoundError(f"{self.label} not found: {request_id}")

        approver = self._employees.get_by_id(int(approver_id))
        if not approver:
            raise NotFoundError(f"Approver not found: {approver_id}")

        self._authorize(current_role, approver, request.employee_id)

        if request.status.is_processed:
            raise AlreadyProcessedError(f"{self.label} has already been {request.status.value.lower()}")
        return request

    def _authorize(self, current_role: Role, approver: Employee, requester_id: int) -> None:
        if has_permission(current_role, Permission.APPROVE_ALL_REQUESTS):
            return

        requester = self._employees.get_by_id(int(requester_id))
        if requester and requester.supervisor_id == approver.employee_id:
            return
        raise AuthorizationError(
            f"Employee {approver.employee_id} is not the supervisor of employee {requester_id}"
        )

    def _transition(
        self,
        request_id: int,
        status: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        now: datetime,
    ) -> None:
        if not self._decide(int(request_id), status=status, approver_id=int(approver_id), notes=notes, now=now):
            raise self._already_processed(request_id)

    def _already_processed(self, request_id: int) -> AlreadyProcessedError:
        current = self._get(int(request_id))
        state = current.status.value.lower() if current else "processed"
        return AlreadyProcessedError(f"{self.label} has already been {state}")
