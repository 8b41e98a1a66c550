from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core import constants


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    leave_type_name: str
    max_days_per_year: Optional[int] = None

    @property
    def default_allocation(self) -> int:
        """Days allocated when a year's balance is created."""
        name = self.leave_type_name.lower()
        if "annual" in name or "vacation" in name:
            return constants.DEFAULT_ANNUAL_LEAVE_DAYS
        if "sick" in name:
            return constants.DEFAULT_SICK_LEAVE_DAYS
        if self.max_days_per_year is not None:
            return int(self.max_days_per_year)
        return constants.DEFAULT_ANNUAL_LEAVE_DAYS


@dataclass(frozen=True)
class LeaveBalance:
    """Per (employee, leave type, year) entitlement ledger.

    ``remaining_days`` is cached in storage; it always equals
    total + carry-over - used because both are written in one statement.
    """

    balance_id: int
    employee_id: int
    leave_type_id: int
    balance_year: int
    total_days: int
    used_days: int = 0
    carry_over_days: int = 0
    remaining_days: int = 0

    @property
    def available_days(self) -> int:
        return self.total_days + self.carry_over_days - self.used_days


@dataclass(frozen=True)
class LeaveSummary:
    employee_id: int
    year: int
    balances: list[LeaveBalance] = field(default_factory=list)

    @property
    def total_allocated_days(self) -> int:
        return sum(b.total_days for b in self.balances)

    @property
    def total_used_days(self) -> int:
        return sum(b.used_days for b in self.balances)

    @property
    def total_remaining_days(self) -> int:
        return sum(b.remaining_days for b in self.balances)
