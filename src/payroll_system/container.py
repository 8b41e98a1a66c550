from __future__ import annotations

import logging
from dataclasses import dataclass

from .attendance.factory import TardinessStrategyFactory
from .attendance.model import WorkSchedule
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLTardinessRepository
from .attendance.service import AttendanceAggregator
from .common.audit import AuditLog, LoggingAuditLog
from .common.logging_config import configure_logging
from .config import EngineSettings, load_settings
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveBalanceRepository, MySQLLeaveTypeRepository
from .leave.service import LeaveBalanceTracker
from .payroll.batch import PayrollBatchProcessor
from .payroll.calculator.deductions import DeductionEngine
from .payroll.calculator.overtime import OvertimeCalculator
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import (
    MySQLPayPeriodRepository,
    MySQLPayrollRepository,
    MySQLReferenceDataRepository,
)
from .payroll.service import PayrollService
from .requests.leave_workflow import LeaveRequestWorkflow
from .requests.mysql_request_repository import MySQLLeaveRequestRepository, MySQLOvertimeRequestRepository
from .requests.overtime_workflow import OvertimeRequestWorkflow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    settings: EngineSettings
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    tardiness_repo: MySQLTardinessRepository
    leave_types_repo: MySQLLeaveTypeRepository
    leave_balances_repo: MySQLLeaveBalanceRepository
    leave_requests_repo: MySQLLeaveRequestRepository
    overtime_requests_repo: MySQLOvertimeRequestRepository
    pay_periods_repo: MySQLPayPeriodRepository
    payroll_repo: MySQLPayrollRepository
    reference_repo: MySQLReferenceDataRepository

    employee_service: EmployeeService
    attendance: AttendanceAggregator
    leave_balances: LeaveBalanceTracker
    leave_workflow: LeaveRequestWorkflow
    overtime_workflow: OvertimeRequestWorkflow
    payroll_service: PayrollService
    payroll_batch: PayrollBatchProcessor


def build_container(settings: EngineSettings | None = None, *, audit: AuditLog | None = None) -> Container:
    settings = settings or load_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    audit = audit or LoggingAuditLog()

    conn = DatabaseConnection(settings.db_config)
    if settings.auto_init_db:
        executed = apply_schema(conn)
        logger.info("Applied schema.sql (%s statements) to %s", executed, settings.db_config.database)

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    tardiness_repo = MySQLTardinessRepository(conn)
    leave_types_repo = MySQLLeaveTypeRepository(conn)
    leave_balances_repo = MySQLLeaveBalanceRepository(conn)
    leave_requests_repo = MySQLLeaveRequestRepository(conn)
    overtime_requests_repo = MySQLOvertimeRequestRepository(conn)
    pay_periods_repo = MySQLPayPeriodRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    reference_repo = MySQLReferenceDataRepository(conn)

    overtime_calculator = OvertimeCalculator()

    employee_service = EmployeeService(employees_repo, audit=audit)
    attendance = AttendanceAggregator(
        attendance_repo,
        tardiness_repo,
        employees_repo,
        schedule=WorkSchedule(
            start_time=settings.standard_start_time,
            end_time=settings.standard_end_time,
            grace_minutes=settings.late_grace_minutes,
        ),
        strategy_factory=TardinessStrategyFactory(),
        audit=audit,
    )
    leave_balances = LeaveBalanceTracker(leave_types_repo, leave_balances_repo, audit=audit)
    leave_workflow = LeaveRequestWorkflow(
        leave_requests_repo,
        leave_types_repo,
        leave_balances,
        employees_repo,
        max_advance_days=settings.leave_max_advance_days,
        max_backdate_days=settings.leave_max_backdate_days,
        initialize_missing_balance=settings.initialize_missing_leave_balance,
        audit=audit,
    )
    overtime_workflow = OvertimeRequestWorkflow(
        overtime_requests_repo,
        attendance_repo,
        employees_repo,
        calculator=overtime_calculator,
        audit=audit,
    )
    calculator = StandardPayrollCalculator(
        attendance,
        overtime_requests_repo,
        reference_repo,
        deductions=DeductionEngine(
            tax_brackets=settings.tax_brackets,
            contributions=settings.statutory_contributions,
        ),
        overtime=overtime_calculator,
    )
    payroll_service = PayrollService(employees_repo, pay_periods_repo, payroll_repo, calculator, audit=audit)
    payroll_batch = PayrollBatchProcessor(payroll_service, employees_repo, pay_periods_repo, audit=audit)

    return Container(
        settings=settings,
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        tardiness_repo=tardiness_repo,
        leave_types_repo=leave_types_repo,
        leave_balances_repo=leave_balances_repo,
        leave_requests_repo=leave_requests_repo,
        overtime_requests_repo=overtime_requests_repo,
        pay_periods_repo=pay_periods_repo,
        payroll_repo=payroll_repo,
        reference_repo=reference_repo,
        employee_service=employee_service,
        attendance=attendance,
        leave_balances=leave_balances,
        leave_workflow=leave_workflow,
        overtime_workflow=overtime_workflow,
        payroll_service=payroll_service,
        payroll_batch=payroll_batch,
    )
