from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import LeaveRequest, OvertimeRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_in_range(self, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        """Requests whose [start, end] intersects the range."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str] = None,
    ) -> bool:
        """Transition a Pending request; False if it was no longer Pending."""

        raise NotImplementedError

    def approve_with_usage(
        self,
        *,
        request_id: int,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str],
        balance_id: int,
        days: int,
    ) -> bool:
        """Approve a Pending request and charge ``days`` to the balance in one transaction.

        False if the request was no longer Pending; the balance is then untouched.
        """

        raise NotImplementedError


class OvertimeRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        overtime_start: datetime,
        overtime_end: datetime,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeRequest]:
        raise NotImplementedError

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        *,
        employee_id: Optional[int] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> Sequence[OvertimeRequest]:
        """Requests whose start falls within [start, end]."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[OvertimeRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError
