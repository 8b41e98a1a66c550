from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from payroll_system.attendance.model import AttendanceRecord, TardinessRecord, WorkSchedule
from payroll_system.attendance.service import AttendanceAggregator
from payroll_system.common.audit import InMemoryAuditLog
from payroll_system.common.money import total
from payroll_system.core.enums import ApprovalStatus, EmployeeStatus, Role
from payroll_system.core.exceptions import StorageError
from payroll_system.employees.model import Employee
from payroll_system.leave.model import LeaveBalance, LeaveType
from payroll_system.leave.service import LeaveBalanceTracker
from payroll_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from payroll_system.payroll.model import PayPeriod, PayrollRecord, PayrollSummary, PositionBenefit
from payroll_system.payroll.service import PayrollService
from payroll_system.requests.model import LeaveRequest, OvertimeRequest


class FakeEmployeesRepo:
    def __init__(self, employees=()):
        self._rows: dict[int, Employee] = {e.employee_id: e for e in employees}
        self.fail_listing = False

    def add(self, employee: Employee) -> Employee:
        self._rows[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def list_by_status(self, status):
        if self.fail_listing:
            raise StorageError("Database unavailable: connection refused")
        return [e for e in sorted(self._rows.values(), key=lambda e: e.employee_id) if e.status == status]

    def list_by_supervisor(self, supervisor_id):
        return [e for e in self._rows.values() if e.supervisor_id == int(supervisor_id)]

    def list_by_department(self, department_id):
        return [e for e in self._rows.values() if e.department_id == int(department_id)]

    def update_salary(self, employee_id, *, basic_salary, hourly_rate):
        current = self._rows.get(int(employee_id))
        if not current:
            return False
        self._rows[int(employee_id)] = replace(current, basic_salary=basic_salary, hourly_rate=hourly_rate)
        return True


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, AttendanceRecord] = {}

    def add(self, employee_id, work_date, time_in=None, time_out=None) -> AttendanceRecord:
        rec = AttendanceRecord(self._next_id, int(employee_id), work_date, time_in, time_out)
        self._rows[rec.attendance_id] = rec
        self._next_id += 1
        return rec

    def get_by_id(self, attendance_id):
        return self._rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        for r in self._rows.values():
            if r.employee_id == int(employee_id) and r.work_date == work_date:
                return r
        return None

    def list_for_employee(self, employee_id, start_date, end_date):
        rows = [
            r
            for r in self._rows.values()
            if r.employee_id == int(employee_id) and start_date <= r.work_date <= end_date
        ]
        return sorted(rows, key=lambda r: r.work_date)

    def list_for_date(self, work_date):
        return [r for r in self._rows.values() if r.work_date == work_date]

    def create_time_in(self, *, employee_id, work_date, time_in):
        if self.get_for_employee_and_date(employee_id, work_date):
            return 0
        return self.add(employee_id, work_date, time_in).attendance_id

    def update_time_out(self, *, attendance_id, time_out):
        rec = self._rows.get(int(attendance_id))
        if not rec or rec.time_out is not None:
            return False
        self._rows[rec.attendance_id] = replace(rec, time_out=time_out)
        return True


class FakeTardinessRepo:
    def __init__(self, attendance: FakeAttendanceRepo):
        self._attendance = attendance
        self._next_id = 1
        self.records: list[TardinessRecord] = []

    def create(self, *, attendance_id, tardiness_hours, tardiness_type, note=None):
        rec = TardinessRecord(self._next_id, int(attendance_id), tardiness_hours, tardiness_type, note)
        self.records.append(rec)
        self._next_id += 1
        return rec.tardiness_id

    def list_for_employee(self, employee_id, start_date, end_date):
        out = []
        for t in self.records:
            att = self._attendance.get_by_id(t.attendance_id)
            if att and att.employee_id == int(employee_id) and start_date <= att.work_date <= end_date:
                out.append(t)
        return out


class FakeLeaveTypesRepo:
    def __init__(self, types=()):
        self._rows = {t.leave_type_id: t for t in types}

    def get_by_id(self, leave_type_id):
        return self._rows.get(int(leave_type_id))

    def list_all(self):
        return sorted(self._rows.values(), key=lambda t: t.leave_type_id)


class FakeLeaveBalancesRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, LeaveBalance] = {}

    def add(self, employee_id, leave_type_id, year, total_days, used_days=0, carry_over_days=0) -> LeaveBalance:
        bal = LeaveBalance(
            balance_id=self._next_id,
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            balance_year=int(year),
            total_days=total_days,
            used_days=used_days,
            carry_over_days=carry_over_days,
            remaining_days=total_days + carry_over_days - used_days,
        )
        self._rows[bal.balance_id] = bal
        self._next_id += 1
        return bal

    def get(self, employee_id, leave_type_id, year):
        for b in self._rows.values():
            if (b.employee_id, b.leave_type_id, b.balance_year) == (int(employee_id), int(leave_type_id), int(year)):
                return b
        return None

    def list_for_employee(self, employee_id, year):
        return [b for b in self._rows.values() if b.employee_id == int(employee_id) and b.balance_year == int(year)]

    def create_if_absent(self, *, employee_id, leave_type_id, year, total_days):
        if self.get(employee_id, leave_type_id, year):
            return False
        self.add(employee_id, leave_type_id, year, total_days)
        return True

    def add_used_days(self, *, balance_id, days):
        bal = self._rows.get(int(balance_id))
        if not bal:
            return False
        used = bal.used_days + int(days)
        self._rows[bal.balance_id] = replace(
            bal,
            used_days=used,
            remaining_days=bal.total_days + bal.carry_over_days - used,
        )
        return True


class FakeLeaveRequestsRepo:
    def __init__(self, balances: FakeLeaveBalancesRepo | None = None):
        self._balances = balances
        self._next_id = 1
        self._rows: dict[int, LeaveRequest] = {}

    def add(self, employee_id, leave_type_id, start_date, end_date, status=ApprovalStatus.PENDING) -> LeaveRequest:
        req = LeaveRequest(
            request_id=self._next_id,
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            start_date=start_date,
            end_date=end_date,
            reason="",
            status=status,
        )
        self._rows[req.request_id] = req
        self._next_id += 1
        return req

    def create(self, *, employee_id, leave_type_id, start_date, end_date, reason):
        req = self.add(employee_id, leave_type_id, start_date, end_date)
        self._rows[req.request_id] = replace(req, reason=reason)
        return req.request_id

    def get_by_id(self, request_id):
        return self._rows.get(int(request_id))

    def list_for_employee(self, employee_id):
        return [r for r in self._rows.values() if r.employee_id == int(employee_id)]

    def list_in_range(self, start_date, end_date):
        return [r for r in self._rows.values() if r.start_date <= end_date and r.end_date >= start_date]

    def list_pending(self):
        return [r for r in self._rows.values() if r.status == ApprovalStatus.PENDING]

    def decide(self, *, request_id, status, decided_by, decided_at, supervisor_notes=None):
        req = self._rows.get(int(request_id))
        if not req or req.status != ApprovalStatus.PENDING:
            return False
        self._rows[req.request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at,
            supervisor_notes=supervisor_notes,
        )
        return True

    def approve_with_usage(self, *, request_id, decided_by, decided_at, supervisor_notes, balance_id, days):
        req = self._rows.get(int(request_id))
        if not req or req.status != ApprovalStatus.PENDING:
            return False
        # balance first: if it fails the request stays Pending, as a rolled-back transaction would
        if not self._balances.add_used_days(balance_id=balance_id, days=days):
            raise StorageError(f"Leave balance not found: {balance_id}")
        return self.decide(
            request_id=request_id,
            status=ApprovalStatus.APPROVED,
            decided_by=decided_by,
            decided_at=decided_at,
            supervisor_notes=supervisor_notes,
        )


class FakeOvertimeRequestsRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, OvertimeRequest] = {}

    def add(self, employee_id, overtime_start, overtime_end, status=ApprovalStatus.PENDING) -> OvertimeRequest:
        req = OvertimeRequest(
            request_id=self._next_id,
            employee_id=int(employee_id),
            overtime_start=overtime_start,
            overtime_end=overtime_end,
            reason="",
            status=status,
        )
        self._rows[req.request_id] = req
        self._next_id += 1
        return req

    def create(self, *, employee_id, overtime_start, overtime_end, reason):
        req = self.add(employee_id, overtime_start, overtime_end)
        self._rows[req.request_id] = replace(req, reason=reason)
        return req.request_id

    def get_by_id(self, request_id):
        return self._rows.get(int(request_id))

    def list_for_employee(self, employee_id):
        return [r for r in self._rows.values() if r.employee_id == int(employee_id)]

    def list_in_range(self, start, end, *, employee_id=None, status=None):
        return [
            r
            for r in self._rows.values()
            if start <= r.overtime_start <= end
            and (employee_id is None or r.employee_id == int(employee_id))
            and (status is None or r.status == status)
        ]

    def list_pending(self):
        return [r for r in self._rows.values() if r.status == ApprovalStatus.PENDING]

    def decide(self, *, request_id, status, decided_by, decided_at, supervisor_notes=None):
        req = self._rows.get(int(request_id))
        if not req or req.status != ApprovalStatus.PENDING:
            return False
        self._rows[req.request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at,
            supervisor_notes=supervisor_notes,
        )
        return True


class FakePayPeriodsRepo:
    def __init__(self, periods=()):
        self._rows = {p.pay_period_id: p for p in periods}

    def get_by_id(self, pay_period_id):
        return self._rows.get(int(pay_period_id))


class FakePayrollRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[tuple[int, int], PayrollRecord] = {}
        self.insert_calls = 0
        self.fail_for: set[int] = set()

    def get_for_employee_and_period(self, employee_id, pay_period_id):
        return self._rows.get((int(employee_id), int(pay_period_id)))

    def list_for_period(self, pay_period_id):
        return [r for (_, p), r in sorted(self._rows.items()) if p == int(pay_period_id)]

    def list_for_employee(self, employee_id, limit):
        rows = [r for (e, _), r in self._rows.items() if e == int(employee_id)]
        return sorted(rows, key=lambda r: r.pay_period_id, reverse=True)[:limit]

    def insert_if_absent(self, calculation):
        self.insert_calls += 1
        if calculation.employee_id in self.fail_for:
            raise StorageError(f"Database error: insert failed for employee {calculation.employee_id}")
        key = (calculation.employee_id, calculation.pay_period_id)
        if key in self._rows:
            return False
        self._rows[key] = PayrollRecord(
            payroll_id=self._next_id,
            employee_id=calculation.employee_id,
            pay_period_id=calculation.pay_period_id,
            basic_salary=calculation.basic_salary,
            attendance_earnings=calculation.attendance_earnings,
            overtime_pay=calculation.overtime_pay,
            total_benefits=calculation.total_benefits,
            gross_income=calculation.gross_income,
            total_deductions=calculation.total_deductions,
            net_salary=calculation.net_salary,
        )
        self._next_id += 1
        return True

    def summary(self, pay_period_id):
        rows = self.list_for_period(pay_period_id)
        return PayrollSummary(
            pay_period_id=int(pay_period_id),
            employee_count=len(rows),
            total_gross_income=total(r.gross_income for r in rows),
            total_net_salary=total(r.net_salary for r in rows),
            total_deductions=total(r.total_deductions for r in rows),
            total_benefits=total(r.total_benefits for r in rows),
        )


class FakeReferenceRepo:
    def __init__(self, benefits=()):
        self._benefits = list(benefits)

    def benefits_for_position(self, position_id):
        return [b for b in self._benefits if b.position_id == int(position_id)]


# -------- Shared data --------

HR_ID = 1
SUPERVISOR_ID = 2
EMPLOYEE_ID = 3
OTHER_TEAM_ID = 4

# Monday
TODAY = date(2025, 3, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def audit():
    return InMemoryAuditLog()


@pytest.fixture
def employees():
    return FakeEmployeesRepo(
        [
            Employee(HR_ID, "Ana Reyes", Decimal("50000.00"), Decimal("300.00"), role=Role.HR),
            Employee(SUPERVISOR_ID, "Ben Cruz", Decimal("40000.00"), Decimal("250.00"), role=Role.SUPERVISOR),
            Employee(
                EMPLOYEE_ID,
                "Cara Santos",
                Decimal("30000.00"),
                Decimal("200.00"),
                supervisor_id=SUPERVISOR_ID,
                position_id=10,
            ),
            Employee(OTHER_TEAM_ID, "Dan Lim", Decimal("20000.00"), Decimal("100.00"), supervisor_id=HR_ID),
            Employee(
                5,
                "Eve Tan",
                Decimal("25000.00"),
                Decimal("150.00"),
                status=EmployeeStatus.TERMINATED,
                supervisor_id=SUPERVISOR_ID,
            ),
        ]
    )


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def tardiness_repo(attendance_repo):
    return FakeTardinessRepo(attendance_repo)


@pytest.fixture
def aggregator(attendance_repo, tardiness_repo, employees, audit):
    return AttendanceAggregator(
        attendance_repo,
        tardiness_repo,
        employees,
        schedule=WorkSchedule(time(8, 0), time(17, 0), 15),
        audit=audit,
    )


@pytest.fixture
def leave_types():
    return FakeLeaveTypesRepo(
        [
            LeaveType(1, "Annual Leave"),
            LeaveType(2, "Sick Leave"),
            LeaveType(3, "Bereavement", max_days_per_year=3),
        ]
    )


@pytest.fixture
def leave_balances():
    return FakeLeaveBalancesRepo()


@pytest.fixture
def tracker(leave_types, leave_balances, audit):
    return LeaveBalanceTracker(leave_types, leave_balances, audit=audit)


@pytest.fixture
def leave_requests(leave_balances):
    return FakeLeaveRequestsRepo(leave_balances)


@pytest.fixture
def overtime_requests():
    return FakeOvertimeRequestsRepo()


@pytest.fixture
def pay_periods():
    return FakePayPeriodsRepo(
        [
            PayPeriod(1, date(2025, 3, 1), date(2025, 3, 15), date(2025, 3, 20), "March 1-15"),
            PayPeriod(2, date(2025, 3, 16), date(2025, 3, 31), date(2025, 4, 5), "March 16-31"),
        ]
    )


@pytest.fixture
def payroll_repo():
    return FakePayrollRepo()


@pytest.fixture
def reference_repo():
    return FakeReferenceRepo(
        [
            PositionBenefit(10, "Rice allowance", Decimal("1000.00")),
            PositionBenefit(10, "Transportation", Decimal("500.00")),
            PositionBenefit(11, "Meal", Decimal("300.00")),
        ]
    )


@pytest.fixture
def at():
    """Build a datetime on TODAY."""

    def _at(hour, minute=0, day=TODAY):
        return datetime.combine(day, time(hour, minute))

    return _at


@pytest.fixture
def calculator(aggregator, overtime_requests, reference_repo):
    return StandardPayrollCalculator(aggregator, overtime_requests, reference_repo)


@pytest.fixture
def payroll_service(employees, pay_periods, payroll_repo, calculator, audit):
    return PayrollService(employees, pay_periods, payroll_repo, calculator, audit=audit)
