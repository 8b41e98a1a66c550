from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for permission checks."""

    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"
    HR = "hr"
    IT = "it"


class Permission(str, Enum):
    RECORD_ATTENDANCE = "RECORD_ATTENDANCE"
    VIEW_ALL_ATTENDANCE = "VIEW_ALL_ATTENDANCE"
    SUBMIT_REQUESTS = "SUBMIT_REQUESTS"
    APPROVE_TEAM_REQUESTS = "APPROVE_TEAM_REQUESTS"
    APPROVE_ALL_REQUESTS = "APPROVE_ALL_REQUESTS"
    MANAGE_LEAVE_BALANCES = "MANAGE_LEAVE_BALANCES"
    PROCESS_PAYROLL = "PROCESS_PAYROLL"
    MANAGE_EMPLOYEES = "MANAGE_EMPLOYEES"


class EmployeeStatus(str, Enum):
    """Employment status as stored in the database."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_LEAVE = "OnLeave"
    TERMINATED = "Terminated"


class ApprovalStatus(str, Enum):
    """Approval lifecycle of leave and overtime requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_processed(self) -> bool:
        return self is not ApprovalStatus.PENDING


class TardinessType(str, Enum):
    LATE = "Late"
    UNDERTIME = "Undertime"


class AttendanceStatus(str, Enum):
    """Per-day status shown in the daily attendance report."""

    PRESENT = "Present"
    LATE = "Late"
    EARLY_LEAVE = "Early Leave"
    INCOMPLETE = "Incomplete"
    ABSENT = "Absent"


class FailureReason(str, Enum):
    """Machine-readable reason attached to failed operation results."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    ALREADY_MARKED = "ALREADY_MARKED"
    NO_TIME_IN = "NO_TIME_IN"
    MISSING_REASON = "MISSING_REASON"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    OVERLAP = "OVERLAP"
    INCOMPLETE_ATTENDANCE = "INCOMPLETE_ATTENDANCE"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFIGURATION = "CONFIGURATION"
    STORAGE = "STORAGE"
