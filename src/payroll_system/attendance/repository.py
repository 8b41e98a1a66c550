from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import TardinessType
from .model import AttendanceRecord, TardinessRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], oldest first."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_time_in(self, *, employee_id: int, work_date: date, time_in: time) -> int:
        """Insert the day's record; returns 0 when one already exists."""

        raise NotImplementedError

    def update_time_out(self, *, attendance_id: int, time_out: time) -> bool:
        """Set time-out only if still empty."""

        raise NotImplementedError


class TardinessRepository(Protocol):
    def create(
        self,
        *,
        attendance_id: int,
        tardiness_hours: Decimal,
        tardiness_type: TardinessType,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[TardinessRecord]:
        raise NotImplementedError
