from __future__ import annotations

from decimal import Decimal

from ...attendance.service import AttendanceAggregator
from ...common.datetime_utils import day_end, day_start, month_bounds
from ...common.money import ZERO, round_money, to_decimal, total
from ...core import constants
from ...core.enums import ApprovalStatus
from ...employees.model import Employee
from ...requests.repository import OvertimeRequestRepository
from ..model import PayPeriod, PayrollCalculation
from ..repository import ReferenceDataRepository
from .base import PayrollCalculator
from .deductions import DeductionEngine
from .overtime import OvertimeCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule.

    gross = basic share + attendance earnings + overtime pay + benefits
    net   = gross - (contributions on monthly basic + withholding tax on gross)
    """

    def __init__(
        self,
        attendance: AttendanceAggregator,
        overtime_requests: OvertimeRequestRepository,
        reference_data: ReferenceDataRepository,
        *,
        deductions: DeductionEngine | None = None,
        overtime: OvertimeCalculator | None = None,
    ):
        self._attendance = attendance
        self._overtime_requests = overtime_requests
        self._reference = reference_data
        self._deductions = deductions or DeductionEngine()
        self._overtime = overtime or OvertimeCalculator()

    def calculate(self, employee: Employee, period: PayPeriod) -> PayrollCalculation:
        basic_share = self.basic_share(employee)
        attendance_earnings = self.attendance_earnings(employee, period)
        overtime_pay = self.overtime_pay(employee, period)
        benefits = self.total_benefits(employee)

        gross = basic_share + attendance_earnings + overtime_pay + benefits
        return PayrollCalculation(
            employee_id=employee.employee_id,
            pay_period_id=period.pay_period_id,
            basic_salary=basic_share,
            attendance_earnings=attendance_earnings,
            overtime_pay=overtime_pay,
            total_benefits=benefits,
            deductions=self._deductions.breakdown(to_decimal(employee.basic_salary), gross),
        )

    def basic_share(self, employee: Employee) -> Decimal:
        return round_money(to_decimal(employee.basic_salary) / Decimal(constants.PAY_PERIODS_PER_MONTH))

    def attendance_earnings(self, employee: Employee, period: PayPeriod) -> Decimal:
        hours = self._attendance.complete_hours_between(employee.employee_id, period.start_date, period.end_date)
        if hours <= 0:
            return ZERO
        return round_money(hours * to_decimal(employee.hourly_rate))

    def overtime_pay(self, employee: Employee, period: PayPeriod) -> Decimal:
        # approved overtime of the calendar month the period starts in
        start, end = month_bounds(period.start_date.year, period.start_date.month)
        approved = self._overtime_requests.list_in_range(
            day_start(start),
            day_end(end),
            employee_id=employee.employee_id,
            status=ApprovalStatus.APPROVED,
        )
        return self._overtime.total_pay(approved, to_decimal(employee.hourly_rate))

    def total_benefits(self, employee: Employee) -> Decimal:
        if employee.position_id is None:
            return ZERO
        return total(b.benefit_value for b in self._reference.benefits_for_position(employee.position_id))
