from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..attendance.repository import AttendanceRepository
from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog
from ..common.datetime_utils import day_end, day_start, month_bounds, week_bounds
from ..common.money import ZERO, minutes_to_hours, total
from ..common.validators import ranges_overlap, require_present
from ..core import constants
from ..core.enums import ApprovalStatus, FailureReason, Permission, Role
from ..core.exceptions import DomainError, NotFoundError, StorageError, ValidationError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.overtime import OvertimeCalculator
from .model import OvertimeRequest
from .repository import OvertimeRequestRepository
from .workflow import RequestWorkflow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeSubmissionResult(OperationResult):
    request_id: Optional[int] = None
    employee_id: Optional[int] = None
    overtime_hours: Decimal = ZERO
    estimated_pay: Decimal = ZERO
    is_weekend: bool = False
    is_night_shift: bool = False


@dataclass(frozen=True)
class OvertimeMonthlySummary:
    employee_id: int
    year: int
    month: int
    total_hours: Decimal = ZERO
    total_pay: Decimal = ZERO
    approved_count: int = 0
    pending_count: int = 0
    rejected_count: int = 0


@dataclass(frozen=True)
class OvertimeRanking:
    employee_id: int
    full_name: str
    total_hours: Decimal


class OvertimeRequestWorkflow(RequestWorkflow[OvertimeRequest]):
    label = "Overtime request"
    component = "overtime_request"

    def __init__(
        self,
        requests: OvertimeRequestRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculator: OvertimeCalculator | None = None,
        min_minutes: int = constants.MIN_OVERTIME_MINUTES,
        max_daily_hours: int = constants.MAX_DAILY_OVERTIME_HOURS,
        max_weekly_hours: int = constants.MAX_WEEKLY_OVERTIME_HOURS,
        audit: AuditLog | None = None,
    ):
        super().__init__(employees, audit=audit)
        self._requests = requests
        self._attendance = attendance
        self._calculator = calculator or OvertimeCalculator()
        self._min_minutes = int(min_minutes)
        self._max_daily_hours = Decimal(max_daily_hours)
        self._max_weekly_hours = Decimal(max_weekly_hours)

    # -------- Submission --------
    def submit(
        self,
        employee_id: int,
        overtime_start: Optional[datetime],
        overtime_end: Optional[datetime],
        reason: str = "",
        *,
        current_role: Role,
    ) -> OvertimeSubmissionResult:
        try:
            require_permission(current_role, Permission.SUBMIT_REQUESTS)

            employee = self._employees.get_by_id(int(employee_id))
            if not employee:
                raise NotFoundError(f"Employee not found: {employee_id}")

            overtime_start = require_present(overtime_start, "Start time")
            overtime_end = require_present(overtime_end, "End time")
            self._validate(int(employee_id), overtime_start, overtime_end)

            request_id = self._requests.create(
                employee_id=int(employee_id),
                overtime_start=overtime_start,
                overtime_end=overtime_end,
                reason=(reason or "").strip(),
            )
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent(self.component, "submit", employee_id, FAILURE, None, str(e)))
            return OvertimeSubmissionResult.failed(e, employee_id=employee_id)

        draft = OvertimeRequest(
            request_id=request_id,
            employee_id=int(employee_id),
            overtime_start=overtime_start,
            overtime_end=overtime_end,
            reason=reason or "",
            status=ApprovalStatus.PENDING,
        )
        logger.info("Overtime request %s submitted: employee %s, %s hours", request_id, employee_id, draft.hours)
        self._audit.record(AuditEvent(self.component, "submit", employee_id, SUCCESS, request_id))
        return OvertimeSubmissionResult.ok(
            "Overtime request submitted successfully",
            request_id=request_id,
            employee_id=int(employee_id),
            overtime_hours=draft.hours,
            estimated_pay=self._calculator.pay(draft, employee.hourly_rate),
            is_weekend=draft.is_weekend,
            is_night_shift=draft.is_night_shift,
        )

    def _validate(self, employee_id: int, start: datetime, end: datetime) -> None:
        if end <= start:
            raise ValidationError("End time must be after start time")

        minutes = int((end - start).total_seconds() // 60)
        if minutes < self._min_minutes:
            raise ValidationError(f"Minimum overtime duration is {self._min_minutes} minutes")

        hours = minutes_to_hours(minutes)
        if hours > self._max_daily_hours:
            raise ValidationError(
                f"Maximum daily overtime is {self._max_daily_hours} hours",
                reason=FailureReason.LIMIT_EXCEEDED,
            )

        attendance = self._attendance.get_for_employee_and_date(employee_id, start.date())
        if not attendance or not attendance.is_complete:
            raise ValidationError(
                "Employee must have complete regular attendance before requesting overtime",
                reason=FailureReason.INCOMPLETE_ATTENDANCE,
            )

        self._check_weekly_limit(employee_id, start.date(), hours)

        for existing in self._requests.list_for_employee(employee_id):
            if existing.blocks_new_requests and ranges_overlap(
                start, end, existing.overtime_start, existing.overtime_end
            ):
                raise ValidationError(
                    "Overtime request overlaps with existing request",
                    reason=FailureReason.OVERLAP,
                )

    def _check_weekly_limit(self, employee_id: int, day: date, requested_hours: Decimal) -> None:
        week_hours = self.weekly_approved_hours(employee_id, day)
        if week_hours + requested_hours > self._max_weekly_hours:
            raise ValidationError(
                f"Weekly overtime limit of {self._max_weekly_hours} hours would be exceeded",
                reason=FailureReason.LIMIT_EXCEEDED,
            )

    # -------- Approval hooks --------
    def _get(self, request_id: int) -> Optional[OvertimeRequest]:
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

    def _check_approvable(self, request: OvertimeRequest) -> None:
        # other requests may have been approved since submission
        self._check_weekly_limit(request.employee_id, request.overtime_start.date(), request.hours)

    def _on_approved(self, request: OvertimeRequest, *, now: datetime) -> dict[str, Any]:
        employee = self._employees.get_by_id(request.employee_id)
        pay = self._calculator.pay(request, employee.hourly_rate) if employee else ZERO
        return {"overtime_hours": request.hours, "overtime_pay": pay}

    # -------- Queries --------
    def pending_requests(self) -> list[OvertimeRequest]:
        return list(self._requests.list_pending())

    def requests_for_employee(self, employee_id: int) -> list[OvertimeRequest]:
        return list(self._requests.list_for_employee(int(employee_id)))

    def approved_between(self, employee_id: int, start_date: date, end_date: date) -> list[OvertimeRequest]:
        return list(
            self._requests.list_in_range(
                day_start(start_date),
                day_end(end_date),
                employee_id=int(employee_id),
                status=ApprovalStatus.APPROVED,
            )
        )

    def total_approved_hours(self, employee_id: int, start_date: date, end_date: date) -> Decimal:
        return total(r.hours for r in self.approved_between(employee_id, start_date, end_date))

    def weekly_approved_hours(self, employee_id: int, day: date) -> Decimal:
        monday, sunday = week_bounds(day)
        return self.total_approved_hours(employee_id, monday, sunday)

    def monthly_summary(self, employee_id: int, year: int, month: int) -> OvertimeMonthlySummary:
        start, end = month_bounds(year, month)
        requests = self._requests.list_in_range(day_start(start), day_end(end), employee_id=int(employee_id))
        approved = [r for r in requests if r.status == ApprovalStatus.APPROVED]

        employee = self._employees.get_by_id(int(employee_id))
        pay = self._calculator.total_pay(approved, employee.hourly_rate) if employee else ZERO

        return OvertimeMonthlySummary(
            employee_id=int(employee_id),
            year=year,
            month=month,
            total_hours=total(r.hours for r in approved),
            total_pay=pay,
            approved_count=len(approved),
            pending_count=sum(1 for r in requests if r.status == ApprovalStatus.PENDING),
            rejected_count=sum(1 for r in requests if r.status == ApprovalStatus.REJECTED),
        )

    def top_overtime_employees(self, start_date: date, end_date: date, limit: int = 10) -> list[OvertimeRanking]:
        approved = self._requests.list_in_range(
            day_start(start_date), day_end(end_date), status=ApprovalStatus.APPROVED
        )

        hours_by_employee: dict[int, Decimal] = {}
        for r in approved:
            hours_by_employee[r.employee_id] = hours_by_employee.get(r.employee_id, ZERO) + r.hours

        ranked = sorted(hours_by_employee.items(), key=lambda kv: (-kv[1], kv[0]))[: max(int(limit), 0)]
        out: list[OvertimeRanking] = []
        for employee_id, hours in ranked:
            employee = self._employees.get_by_id(employee_id)
            out.append(OvertimeRanking(employee_id, employee.full_name if employee else "", hours))
        return out
