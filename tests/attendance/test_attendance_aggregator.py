from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from payroll_system.core.enums import AttendanceStatus, FailureReason, Role, TardinessType
from payroll_system.core.exceptions import AuthorizationError, ValidationError


def test_time_in_after_grace_creates_late_record(aggregator, tardiness_repo, audit, at):
    result = aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(8, 16))

    assert result.success
    assert result.is_late
    assert result.late_minutes == 16
    assert "Late by 16 minutes" in result.message

    assert len(tardiness_repo.records) == 1
    record = tardiness_repo.records[0]
    assert record.tardiness_type == TardinessType.LATE
    assert record.tardiness_hours == Decimal("0.27")
    assert result.tardiness_id == record.tardiness_id
    assert "attendance.tardiness" in audit.actions()


def test_time_in_within_grace_is_late_without_record(aggregator, tardiness_repo, at):
    result = aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(8, 10))

    assert result.success
    assert result.is_late
    assert result.late_minutes == 10
    assert result.tardiness_id is None
    assert tardiness_repo.records == []


def test_time_in_twice_same_day_is_already_marked(aggregator, at):
    aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(7, 55))
    result = aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(8, 5))

    assert not result.success
    assert result.reason == FailureReason.ALREADY_MARKED


def test_time_in_unknown_employee_is_not_found(aggregator, audit, at):
    result = aggregator.record_time_in(99, current_role=Role.EMPLOYEE, now=at(8, 0))

    assert not result.success
    assert result.reason == FailureReason.NOT_FOUND
    assert audit.actions(outcome="failure") == ["attendance.time_in"]


def test_time_out_without_time_in(aggregator, at):
    result = aggregator.record_time_out(3, current_role=Role.EMPLOYEE, now=at(17, 0))

    assert not result.success
    assert result.reason == FailureReason.NO_TIME_IN


def test_time_out_early_creates_undertime_record(aggregator, tardiness_repo, at):
    aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(8, 0))
    result = aggregator.record_time_out(3, current_role=Role.EMPLOYEE, now=at(16, 30))

    assert result.success
    assert result.undertime_minutes == 30
    assert result.hours_worked == Decimal("8.50")
    assert not result.is_late

    assert [r.tardiness_type for r in tardiness_repo.records] == [TardinessType.UNDERTIME]
    assert tardiness_repo.records[0].tardiness_hours == Decimal("0.50")


def test_time_out_twice_is_already_marked(aggregator, at):
    aggregator.record_time_in(3, current_role=Role.EMPLOYEE, now=at(8, 0))
    aggregator.record_time_out(3, current_role=Role.EMPLOYEE, now=at(17, 0))
    result = aggregator.record_time_out(3, current_role=Role.EMPLOYEE, now=at(17, 30))

    assert not result.success
    assert result.reason == FailureReason.ALREADY_MARKED


def test_time_out_before_time_in_is_rejected(aggregator, attendance_repo, today, at):
    attendance_repo.add(3, today, time(9, 0))

    result = aggregator.record_time_out(3, current_role=Role.EMPLOYEE, now=at(8, 30))

    assert not result.success
    assert result.reason == FailureReason.VALIDATION


def test_incomplete_days_count_zero_hours(aggregator, attendance_repo):
    attendance_repo.add(3, date(2025, 3, 3), time(8, 0), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 4), time(8, 0), time(12, 30))
    attendance_repo.add(3, date(2025, 3, 5), time(8, 0))

    assert aggregator.complete_hours_between(3, date(2025, 3, 1), date(2025, 3, 15)) == Decimal("13.50")

    stats = aggregator.statistics_between(3, date(2025, 3, 1), date(2025, 3, 15))
    assert (stats.total_days, stats.complete_days, stats.incomplete_days) == (3, 2, 1)


def test_no_attendance_means_zero_hours(aggregator):
    assert aggregator.complete_hours_between(3, date(2025, 3, 1), date(2025, 3, 15)) == Decimal("0.00")


def test_monthly_summary_rate_and_tardiness_counts(aggregator, attendance_repo, tardiness_repo):
    first = attendance_repo.add(3, date(2025, 3, 3), time(8, 20), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 4), time(8, 0), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 5), time(8, 0), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 6), time(8, 0))
    tardiness_repo.create(
        attendance_id=first.attendance_id,
        tardiness_hours=Decimal("0.33"),
        tardiness_type=TardinessType.LATE,
    )

    summary = aggregator.monthly_summary(3, 2025, 3)

    assert summary.working_days == 21
    assert summary.statistics.complete_days == 3
    # 3 / 21 = 0.1429 -> 14.29 %
    assert summary.attendance_rate == Decimal("14.29")
    assert summary.average_hours_per_day == Decimal("8.89")
    assert summary.late_instances == 1
    assert summary.undertime_instances == 0
    assert summary.total_late_hours == Decimal("0.33")


def test_daily_report_statuses(aggregator, attendance_repo, today):
    attendance_repo.add(1, today, time(8, 0), time(17, 0))
    attendance_repo.add(2, today, time(8, 5), time(17, 0))
    attendance_repo.add(3, today, time(8, 0), time(16, 0))
    attendance_repo.add(4, today, time(7, 50))

    rows = {r.employee_id: r for r in aggregator.daily_report(today, current_role=Role.HR)}

    assert rows[1].status == AttendanceStatus.PRESENT
    assert rows[2].status == AttendanceStatus.LATE
    assert rows[2].late_minutes == 5
    assert rows[3].status == AttendanceStatus.EARLY_LEAVE
    assert rows[3].undertime_minutes == 60
    assert rows[4].status == AttendanceStatus.INCOMPLETE
    assert rows[4].hours_worked == Decimal("0.00")


def test_daily_report_requires_view_permission(aggregator, today):
    with pytest.raises(AuthorizationError):
        aggregator.daily_report(today, current_role=Role.EMPLOYEE)


def test_attendance_history_rejects_inverted_range(aggregator):
    with pytest.raises(ValidationError):
        aggregator.attendance_history(3, date(2025, 3, 10), date(2025, 3, 1))
