from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..common.money import ZERO, minutes_to_hours
from ..core import constants
from ..core.enums import AttendanceStatus, TardinessType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day of one employee.

    Complete iff both times are present; incomplete days count zero hours.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None

    @property
    def is_complete(self) -> bool:
        return self.time_in is not None and self.time_out is not None

    @property
    def worked_minutes(self) -> int:
        if not self.is_complete:
            return 0
        return max(minutes_between(self.time_in, self.time_out), 0)

    @property
    def hours_worked(self) -> Decimal:
        return minutes_to_hours(self.worked_minutes)


@dataclass(frozen=True)
class TardinessRecord:
    tardiness_id: int
    attendance_id: int
    tardiness_hours: Decimal
    tardiness_type: TardinessType
    note: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkSchedule:
    """Standard working hours and the grace period for lateness."""

    start_time: time = constants.STANDARD_START_TIME
    end_time: time = constants.STANDARD_END_TIME
    grace_minutes: int = constants.LATE_GRACE_MINUTES

    def late_minutes(self, at: time) -> int:
        if at <= self.start_time:
            return 0
        return minutes_between(self.start_time, at)

    def undertime_minutes(self, at: time) -> int:
        if at >= self.end_time:
            return 0
        return minutes_between(at, self.end_time)


@dataclass(frozen=True)
class AttendanceStatistics:
    total_days: int = 0
    complete_days: int = 0
    incomplete_days: int = 0
    total_hours: Decimal = ZERO


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    """Read-model for monthly reporting."""

    employee_id: int
    year: int
    month: int
    statistics: AttendanceStatistics
    working_days: int
    attendance_rate: Decimal
    average_hours_per_day: Decimal
    late_instances: int
    undertime_instances: int
    total_late_hours: Decimal


@dataclass(frozen=True)
class DailyAttendanceRow:
    employee_id: int
    full_name: str
    work_date: date
    time_in: Optional[time]
    time_out: Optional[time]
    hours_worked: Decimal
    is_complete: bool
    status: AttendanceStatus
    late_minutes: int = 0
    undertime_minutes: int = 0
