from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from payroll_system.common.audit import FAILURE, SUCCESS, AuditEvent, InMemoryAuditLog, LoggingAuditLog
from payroll_system.common.logging_config import StructuredFormatter, configure_logging
from payroll_system.core.enums import Permission, Role
from payroll_system.core.exceptions import AuthorizationError
from payroll_system.core.permissions import has_permission, require_permission


@pytest.fixture
def package_logger():
    logger = logging.getLogger("payroll_system")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_structured_formatter_emits_one_json_object():
    record = logging.LogRecord("payroll_system.payroll", logging.INFO, __file__, 1, "gross %s", ("100.00",), None)
    record.employee_id = 3
    record.net_salary = Decimal("88.50")
    record.work_date = date(2025, 3, 10)

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "payroll_system.payroll"
    assert payload["message"] == "gross 100.00"
    assert payload["employee_id"] == 3
    assert payload["net_salary"] == "88.50"
    assert payload["work_date"] == "2025-03-10"


def test_configure_logging_is_idempotent(package_logger):
    configure_logging("DEBUG", json_output=True)
    configure_logging("INFO", json_output=True)

    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, StructuredFormatter)
    assert package_logger.level == logging.INFO


def test_logging_audit_log_levels(caplog):
    audit = LoggingAuditLog(logging.getLogger("tests.audit"))

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        audit.record(AuditEvent("leave_request", "approve", 2, SUCCESS, 7))
        audit.record(AuditEvent("leave_request", "reject", 2, FAILURE, 7, "Supervisor notes are required"))

    assert [r.levelno for r in caplog.records] == [logging.INFO, logging.WARNING]
    assert caplog.records[1].detail == "Supervisor notes are required"
    assert caplog.records[0].component == "leave_request"


def test_in_memory_audit_log_filters_by_outcome():
    audit = InMemoryAuditLog()
    audit.record(AuditEvent("payroll", "process_employee", 1, SUCCESS, 3))
    audit.record(AuditEvent("payroll", "batch_finish", 1, FAILURE, 1))

    assert audit.actions() == ["payroll.process_employee", "payroll.batch_finish"]
    assert audit.actions(outcome=FAILURE) == ["payroll.batch_finish"]


@pytest.mark.parametrize(
    "role, permission, allowed",
    [
        (Role.EMPLOYEE, Permission.RECORD_ATTENDANCE, True),
        (Role.EMPLOYEE, Permission.APPROVE_TEAM_REQUESTS, False),
        (Role.SUPERVISOR, Permission.APPROVE_TEAM_REQUESTS, True),
        (Role.SUPERVISOR, Permission.PROCESS_PAYROLL, False),
        (Role.HR, Permission.APPROVE_ALL_REQUESTS, True),
        (Role.IT, Permission.MANAGE_EMPLOYEES, True),
        (Role.IT, Permission.SUBMIT_REQUESTS, False),
    ],
)
def test_role_permissions(role, permission, allowed):
    assert has_permission(role, permission) is allowed


def test_require_permission_raises():
    with pytest.raises(AuthorizationError):
        require_permission(Role.EMPLOYEE, Permission.PROCESS_PAYROLL)
