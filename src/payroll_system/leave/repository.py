from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveBalance, LeaveType


class LeaveTypeRepository(Protocol):
    def get_by_id(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_all(self) -> Sequence[LeaveType]:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def create_if_absent(self, *, employee_id: int, leave_type_id: int, year: int, total_days: int) -> bool:
        """Insert a fresh balance row; False when the key already exists."""

        raise NotImplementedError

    def add_used_days(self, *, balance_id: int, days: int) -> bool:
        """used += days and remaining recomputed, in one statement."""

        raise NotImplementedError
