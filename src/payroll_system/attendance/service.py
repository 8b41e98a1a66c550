from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..common.audit import FAILURE, SUCCESS, AuditEvent, AuditLog, LoggingAuditLog
from ..common.datetime_utils import month_bounds, working_days_between
from ..common.money import ZERO, minutes_to_hours, round_money, total
from ..core.enums import AttendanceStatus, FailureReason, Permission, Role, TardinessType
from ..core.exceptions import AlreadyMarkedError, DomainError, NotFoundError, StorageError, ValidationError
from ..core.permissions import require_permission
from ..core.results import OperationResult
from ..employees.repository import EmployeeRepository
from .factory import TardinessStrategyFactory
from .model import (
    AttendanceRecord,
    AttendanceStatistics,
    DailyAttendanceRow,
    MonthlyAttendanceSummary,
    WorkSchedule,
)
from .repository import AttendanceRepository, TardinessRepository
from .strategies.base import TardinessDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceResult(OperationResult):
    employee_id: Optional[int] = None
    work_date: Optional[date] = None
    recorded_time: Optional[time] = None
    is_late: bool = False
    late_minutes: int = 0
    undertime_minutes: int = 0
    hours_worked: Decimal = ZERO
    tardiness_id: Optional[int] = None


class AttendanceAggregator:
    """Clock events -> attendance records, tardiness records and period totals."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        tardiness: TardinessRepository,
        employees: EmployeeRepository,
        *,
        schedule: WorkSchedule | None = None,
        strategy_factory: TardinessStrategyFactory | None = None,
        audit: AuditLog | None = None,
    ):
        self._attendance = attendance
        self._tardiness = tardiness
        self._employees = employees
        self._schedule = schedule or WorkSchedule()
        self._factory = strategy_factory or TardinessStrategyFactory()
        self._audit = audit or LoggingAuditLog()

    @property
    def schedule(self) -> WorkSchedule:
        return self._schedule

    # -------- Clock events --------
    def record_time_in(self, employee_id: int, *, current_role: Role, now: datetime | None = None) -> AttendanceResult:
        now = now or datetime.now()
        today = now.date()
        at = now.time().replace(microsecond=0)

        try:
            require_permission(current_role, Permission.RECORD_ATTENDANCE)
            self._require_employee(employee_id)

            if self._attendance.get_for_employee_and_date(int(employee_id), today):
                raise AlreadyMarkedError(f"Employee {employee_id} has already timed in today")

            attendance_id = self._attendance.create_time_in(employee_id=int(employee_id), work_date=today, time_in=at)
            if not attendance_id:
                raise AlreadyMarkedError(f"Employee {employee_id} has already timed in today")

            strategy = self._factory.for_time_in(at=at, schedule=self._schedule)
            decision = strategy.decide_time_in(at=at, schedule=self._schedule)
            tardiness_id = self._emit_tardiness(attendance_id, decision, employee_id)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("attendance", "time_in", employee_id, FAILURE, employee_id, str(e)))
            return AttendanceResult.failed(e, employee_id=employee_id, work_date=today)

        message = f"Time in recorded at {at.strftime('%H:%M')}"
        if decision.is_late:
            message += f" (Late by {decision.late_minutes} minutes)"

        self._audit.record(AuditEvent("attendance", "time_in", employee_id, SUCCESS, attendance_id))
        return AttendanceResult.ok(
            message,
            employee_id=int(employee_id),
            work_date=today,
            recorded_time=at,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            tardiness_id=tardiness_id,
        )

    def record_time_out(self, employee_id: int, *, current_role: Role, now: datetime | None = None) -> AttendanceResult:
        now = now or datetime.now()
        today = now.date()
        at = now.time().replace(microsecond=0)

        try:
            require_permission(current_role, Permission.RECORD_ATTENDANCE)
            self._require_employee(employee_id)

            record = self._attendance.get_for_employee_and_date(int(employee_id), today)
            if record and record.time_out is not None:
                raise AlreadyMarkedError(f"Employee {employee_id} has already timed out today")
            if not record or record.time_in is None:
                raise ValidationError(
                    f"Employee {employee_id} has not timed in today",
                    reason=FailureReason.NO_TIME_IN,
                )
            if at < record.time_in:
                raise ValidationError("Time out cannot be earlier than time in")

            if not self._attendance.update_time_out(attendance_id=record.attendance_id, time_out=at):
                raise AlreadyMarkedError(f"Employee {employee_id} has already timed out today")

            completed = AttendanceRecord(
                attendance_id=record.attendance_id,
                employee_id=record.employee_id,
                work_date=record.work_date,
                time_in=record.time_in,
                time_out=at,
            )
            strategy = self._factory.for_time_out(at=at, schedule=self._schedule)
            decision = strategy.decide_time_out(at=at, schedule=self._schedule)
            tardiness_id = self._emit_tardiness(record.attendance_id, decision, employee_id)
        except StorageError:
            raise
        except DomainError as e:
            self._audit.record(AuditEvent("attendance", "time_out", employee_id, FAILURE, employee_id, str(e)))
            return AttendanceResult.failed(e, employee_id=employee_id, work_date=today)

        message = f"Time out recorded at {at.strftime('%H:%M')} (Hours worked: {completed.hours_worked})"
        if decision.undertime_minutes:
            message += f" (Undertime: {decision.undertime_minutes} minutes)"

        self._audit.record(AuditEvent("attendance", "time_out", employee_id, SUCCESS, record.attendance_id))
        return AttendanceResult.ok(
            message,
            employee_id=int(employee_id),
            work_date=today,
            recorded_time=at,
            is_late=record.time_in > self._schedule.start_time,
            late_minutes=self._schedule.late_minutes(record.time_in),
            undertime_minutes=decision.undertime_minutes,
            hours_worked=completed.hours_worked,
            tardiness_id=tardiness_id,
        )

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError(f"Employee not found: {employee_id}")

    def _emit_tardiness(self, attendance_id: int, decision: TardinessDecision, employee_id: int) -> Optional[int]:
        if decision.tardiness_type is None:
            return None

        tardiness_id = self._tardiness.create(
            attendance_id=attendance_id,
            tardiness_hours=minutes_to_hours(decision.tardiness_minutes),
            tardiness_type=decision.tardiness_type,
            note=decision.note,
        )
        logger.info(
            "%s record created for employee %s (%s minutes)",
            decision.tardiness_type.value,
            employee_id,
            decision.tardiness_minutes,
        )
        self._audit.record(AuditEvent("attendance", "tardiness", employee_id, SUCCESS, tardiness_id, decision.tardiness_type.value))
        return tardiness_id

    # -------- Aggregation --------
    def complete_minutes_between(self, employee_id: int, start_date: date, end_date: date) -> int:
        records = self._attendance.list_for_employee(int(employee_id), start_date, end_date)
        return sum(r.worked_minutes for r in records if r.is_complete)

    def complete_hours_between(self, employee_id: int, start_date: date, end_date: date) -> Decimal:
        return minutes_to_hours(self.complete_minutes_between(employee_id, start_date, end_date))

    def statistics_between(self, employee_id: int, start_date: date, end_date: date) -> AttendanceStatistics:
        records = self._attendance.list_for_employee(int(employee_id), start_date, end_date)
        complete = [r for r in records if r.is_complete]
        return AttendanceStatistics(
            total_days=len(records),
            complete_days=len(complete),
            incomplete_days=len(records) - len(complete),
            total_hours=minutes_to_hours(sum(r.worked_minutes for r in complete)),
        )

    def monthly_statistics(self, employee_id: int, year: int, month: int) -> AttendanceStatistics:
        start, end = month_bounds(year, month)
        return self.statistics_between(employee_id, start, end)

    @staticmethod
    def working_days_in_month(year: int, month: int) -> int:
        start, end = month_bounds(year, month)
        return working_days_between(start, end)

    def monthly_summary(self, employee_id: int, year: int, month: int) -> MonthlyAttendanceSummary:
        start, end = month_bounds(year, month)
        stats = self.statistics_between(employee_id, start, end)
        working_days = self.working_days_in_month(year, month)

        rate = ZERO
        if working_days:
            ratio = (Decimal(stats.complete_days) / Decimal(working_days)).quantize(
                Decimal("0.0001"), rounding=ROUND_HALF_UP
            )
            rate = round_money(ratio * 100)

        average = ZERO
        if stats.complete_days:
            average = round_money(stats.total_hours / Decimal(stats.complete_days))

        tardiness = self._tardiness.list_for_employee(int(employee_id), start, end)
        late = [t for t in tardiness if t.tardiness_type == TardinessType.LATE]

        return MonthlyAttendanceSummary(
            employee_id=int(employee_id),
            year=year,
            month=month,
            statistics=stats,
            working_days=working_days,
            attendance_rate=rate,
            average_hours_per_day=average,
            late_instances=len(late),
            undertime_instances=sum(1 for t in tardiness if t.tardiness_type == TardinessType.UNDERTIME),
            total_late_hours=total(t.tardiness_hours for t in late),
        )

    # -------- Queries --------
    def attendance_history(self, employee_id: int, start_date: date, end_date: date) -> list[AttendanceRecord]:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        return list(self._attendance.list_for_employee(int(employee_id), start_date, end_date))

    def daily_report(self, work_date: date, *, current_role: Role) -> list[DailyAttendanceRow]:
        require_permission(current_role, Permission.VIEW_ALL_ATTENDANCE)

        rows: list[DailyAttendanceRow] = []
        for record in self._attendance.list_for_date(work_date):
            employee = self._employees.get_by_id(record.employee_id)
            if not employee:
                continue
            rows.append(self._to_daily_row(record, employee.full_name))
        return rows

    def _to_daily_row(self, record: AttendanceRecord, full_name: str) -> DailyAttendanceRow:
        late = self._schedule.late_minutes(record.time_in) if record.time_in else 0
        undertime = self._schedule.undertime_minutes(record.time_out) if record.time_out else 0

        if record.time_in and record.time_in > self._schedule.start_time:
            status = AttendanceStatus.LATE
        elif record.time_out and record.time_out < self._schedule.end_time:
            status = AttendanceStatus.EARLY_LEAVE
        elif record.is_complete:
            status = AttendanceStatus.PRESENT
        elif record.time_in:
            status = AttendanceStatus.INCOMPLETE
        else:
            status = AttendanceStatus.ABSENT

        return DailyAttendanceRow(
            employee_id=record.employee_id,
            full_name=full_name,
            work_date=record.work_date,
            time_in=record.time_in,
            time_out=record.time_out,
            hours_worked=record.hours_worked,
            is_complete=record.is_complete,
            status=status,
            late_minutes=late if status == AttendanceStatus.LATE else 0,
            undertime_minutes=undertime if status == AttendanceStatus.EARLY_LEAVE else 0,
        )
