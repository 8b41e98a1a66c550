from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

from payroll_system.core.enums import ApprovalStatus


def _seed_attendance(attendance_repo):
    attendance_repo.add(3, date(2025, 3, 3), time(8, 0), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 4), time(8, 0), time(17, 0))
    attendance_repo.add(3, date(2025, 3, 5), time(8, 0))
    # next period
    attendance_repo.add(3, date(2025, 3, 17), time(8, 0), time(17, 0))


def _seed_overtime(overtime_requests):
    overtime_requests.add(3, datetime(2025, 3, 10, 17, 0), datetime(2025, 3, 10, 19, 0), status=ApprovalStatus.APPROVED)
    overtime_requests.add(3, datetime(2025, 3, 20, 17, 0), datetime(2025, 3, 20, 18, 0), status=ApprovalStatus.APPROVED)
    overtime_requests.add(3, datetime(2025, 3, 21, 17, 0), datetime(2025, 3, 21, 18, 0), status=ApprovalStatus.PENDING)
    overtime_requests.add(3, datetime(2025, 4, 1, 17, 0), datetime(2025, 4, 1, 18, 0), status=ApprovalStatus.APPROVED)


def test_standard_calculation(calculator, employees, pay_periods, attendance_repo, overtime_requests):
    _seed_attendance(attendance_repo)
    _seed_overtime(overtime_requests)

    calc = calculator.calculate(employees.get_by_id(3), pay_periods.get_by_id(1))

    assert calc.basic_salary == Decimal("15000.00")
    # 2 complete days of 9h at 200/h; the incomplete day earns nothing
    assert calc.attendance_earnings == Decimal("3600.00")
    # approved overtime of the month: 2h + 1h at 1.5x
    assert calc.overtime_pay == Decimal("900.00")
    assert calc.total_benefits == Decimal("1500.00")
    assert calc.gross_income == Decimal("21000.00")
    assert calc.deductions.withholding_tax == Decimal("33.40")
    assert calc.total_deductions == Decimal("2408.40")
    assert calc.net_salary == Decimal("18591.60")


def test_no_attendance_earns_nothing(calculator, employees, pay_periods):
    calc = calculator.calculate(employees.get_by_id(3), pay_periods.get_by_id(2))

    assert calc.attendance_earnings == Decimal("0.00")
    assert calc.overtime_pay == Decimal("0.00")
    assert calc.gross_income == Decimal("16500.00")


def test_employee_without_position_has_no_benefits(calculator, employees, pay_periods):
    calc = calculator.calculate(employees.get_by_id(4), pay_periods.get_by_id(1))

    assert calc.total_benefits == Decimal("0.00")
    assert calc.basic_salary == Decimal("10000.00")
