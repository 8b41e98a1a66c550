from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import inclusive_days
from ..common.money import minutes_to_hours
from ..core import constants
from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    reason: str
    status: ApprovalStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    supervisor_notes: Optional[str] = None

    @property
    def days(self) -> int:
        """Requested days, both ends inclusive."""
        return inclusive_days(self.start_date, self.end_date)

    @property
    def blocks_new_requests(self) -> bool:
        return self.status in {ApprovalStatus.PENDING, ApprovalStatus.APPROVED}


@dataclass(frozen=True)
class OvertimeRequest:
    request_id: int
    employee_id: int
    overtime_start: datetime
    overtime_end: datetime
    reason: str
    status: ApprovalStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    supervisor_notes: Optional[str] = None

    @property
    def minutes(self) -> int:
        return max(int((self.overtime_end - self.overtime_start).total_seconds() // 60), 0)

    @property
    def hours(self) -> Decimal:
        return minutes_to_hours(self.minutes)

    @property
    def is_weekend(self) -> bool:
        return self.overtime_start.weekday() >= 5

    @property
    def is_night_shift(self) -> bool:
        hour = self.overtime_start.hour
        return hour >= constants.NIGHT_SHIFT_START_HOUR or hour < constants.NIGHT_SHIFT_END_HOUR

    @property
    def blocks_new_requests(self) -> bool:
        return self.status in {ApprovalStatus.PENDING, ApprovalStatus.APPROVED}
