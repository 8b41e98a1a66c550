from __future__ import annotations

import pytest

from payroll_system.core.enums import FailureReason, Role
from payroll_system.core.exceptions import NotFoundError, ValidationError


def test_ensure_year_allocates_every_leave_type_once(tracker, audit):
    assert tracker.ensure_year(3, 2025) == 3
    assert tracker.ensure_year(3, 2025) == 0

    allocations = {b.leave_type_id: b.total_days for b in tracker.balances_for_year(3, 2025)}
    assert allocations == {1: 15, 2: 10, 3: 3}
    assert audit.actions() == ["leave.initialize_year"]


def test_initialize_year_requires_manage_permission(tracker, leave_balances):
    result = tracker.initialize_year(3, 2025, current_role=Role.SUPERVISOR, actor_id=2)

    assert not result.success
    assert result.reason == FailureReason.UNAUTHORIZED
    assert leave_balances.list_for_employee(3, 2025) == []


def test_initialize_year_reports_created_rows(tracker, leave_balances):
    leave_balances.add(3, 1, 2025, 15)

    result = tracker.initialize_year(3, 2025, current_role=Role.HR, actor_id=1)

    assert result.success
    assert result.created == 2


def test_commit_usage_keeps_remaining_in_sync(tracker, leave_balances):
    balance = leave_balances.add(3, 1, 2025, 15, carry_over_days=2)

    tracker.commit_usage(balance.balance_id, 4)

    updated = tracker.get_balance(3, 1, 2025)
    assert updated.used_days == 4
    assert updated.remaining_days == 13
    assert updated.remaining_days == updated.available_days


def test_commit_usage_rejects_non_positive_days(tracker, leave_balances):
    balance = leave_balances.add(3, 1, 2025, 15)

    with pytest.raises(ValidationError):
        tracker.commit_usage(balance.balance_id, 0)


def test_commit_usage_unknown_balance(tracker):
    with pytest.raises(NotFoundError):
        tracker.commit_usage(404, 1)


def test_leave_summary_totals(tracker, leave_balances):
    leave_balances.add(3, 1, 2025, 15, used_days=5)
    leave_balances.add(3, 2, 2025, 10, used_days=1)
    leave_balances.add(3, 1, 2024, 15, used_days=15)

    summary = tracker.leave_summary(3, 2025)

    assert summary.total_allocated_days == 25
    assert summary.total_used_days == 6
    assert summary.total_remaining_days == 19
