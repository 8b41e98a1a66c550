from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayPeriod, PayrollCalculation, PayrollRecord, PayrollSummary, PositionBenefit


class PayPeriodRepository(Protocol):
    def get_by_id(self, pay_period_id: int) -> Optional[PayPeriod]:
        raise NotImplementedError


class PayrollRepository(Protocol):
    def get_for_employee_and_period(self, employee_id: int, pay_period_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_period(self, pay_period_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[PayrollRecord]:
        """Most recent periods first."""

        raise NotImplementedError

    def insert_if_absent(self, calculation: PayrollCalculation) -> bool:
        """Atomic on the (employee, pay period) key; False when a record already existed."""

        raise NotImplementedError

    def summary(self, pay_period_id: int) -> PayrollSummary:
        raise NotImplementedError


class ReferenceDataRepository(Protocol):
    def benefits_for_position(self, position_id: int) -> Sequence[PositionBenefit]:
        raise NotImplementedError
