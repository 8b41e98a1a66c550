from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO
from .calculator.deductions import DeductionBreakdown


@dataclass(frozen=True)
class PayPeriod:
    """Semi-monthly pay interval. Immutable once created."""

    pay_period_id: int
    start_date: date
    end_date: date
    pay_date: date
    description: Optional[str] = None


@dataclass(frozen=True)
class PositionBenefit:
    position_id: int
    benefit_name: str
    benefit_value: Decimal


@dataclass(frozen=True)
class PayrollCalculation:
    """All components of one employee's pay for one period, before persistence."""

    employee_id: int
    pay_period_id: int
    basic_salary: Decimal
    attendance_earnings: Decimal
    overtime_pay: Decimal
    total_benefits: Decimal
    deductions: DeductionBreakdown

    @property
    def gross_income(self) -> Decimal:
        return self.basic_salary + self.attendance_earnings + self.overtime_pay + self.total_benefits

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.total

    @property
    def net_salary(self) -> Decimal:
        return self.gross_income - self.total_deductions


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    pay_period_id: int
    basic_salary: Decimal
    attendance_earnings: Decimal
    overtime_pay: Decimal
    total_benefits: Decimal
    gross_income: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollSummary:
    pay_period_id: int
    employee_count: int = 0
    total_gross_income: Decimal = ZERO
    total_net_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_benefits: Decimal = ZERO
