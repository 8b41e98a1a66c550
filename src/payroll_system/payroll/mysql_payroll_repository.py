from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import PayPeriod, PayrollCalculation, PayrollRecord, PayrollSummary, PositionBenefit
from .repository import PayPeriodRepository, PayrollRepository, ReferenceDataRepository

_PAYROLL_COLUMNS = """
    payroll_id, employee_id, pay_period_id, basic_salary, attendance_earnings,
    overtime_pay, total_benefits, gross_income, total_deductions, net_salary, created_at
"""


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        pay_period_id=int(r["pay_period_id"]),
        basic_salary=as_decimal(r["basic_salary"]),
        attendance_earnings=as_decimal(r["attendance_earnings"]),
        overtime_pay=as_decimal(r["overtime_pay"]),
        total_benefits=as_decimal(r["total_benefits"]),
        gross_income=as_decimal(r["gross_income"]),
        total_deductions=as_decimal(r["total_deductions"]),
        net_salary=as_decimal(r["net_salary"]),
        created_at=r.get("created_at"),
    )


class MySQLPayPeriodRepository(PayPeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, pay_period_id: int) -> Optional[PayPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT pay_period_id, start_date, end_date, pay_date, description
                FROM pay_periods
                WHERE pay_period_id=%s
                """,
                (int(pay_period_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PayPeriod(
                pay_period_id=int(r["pay_period_id"]),
                start_date=r["start_date"],
                end_date=r["end_date"],
                pay_date=r["pay_date"],
                description=r.get("description"),
            )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_period(self, employee_id: int, pay_period_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYROLL_COLUMNS} FROM payroll_records WHERE employee_id=%s AND pay_period_id=%s",
                (int(employee_id), int(pay_period_id)),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def list_for_period(self, pay_period_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYROLL_COLUMNS} FROM payroll_records WHERE pay_period_id=%s ORDER BY employee_id",
                (int(pay_period_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYROLL_COLUMNS}
                FROM payroll_records
                WHERE employee_id=%s
                ORDER BY pay_period_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def insert_if_absent(self, calculation: PayrollCalculation) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO payroll_records(
                    employee_id, pay_period_id, basic_salary, attendance_earnings, overtime_pay,
                    total_benefits, gross_income, total_deductions, net_salary
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(calculation.employee_id),
                    int(calculation.pay_period_id),
                    calculation.basic_salary,
                    calculation.attendance_earnings,
                    calculation.overtime_pay,
                    calculation.total_benefits,
                    calculation.gross_income,
                    calculation.total_deductions,
                    calculation.net_salary,
                ),
            )
            return cur.rowcount > 0

    def summary(self, pay_period_id: int) -> PayrollSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS employee_count,
                       COALESCE(SUM(gross_income), 0) AS total_gross_income,
                       COALESCE(SUM(net_salary), 0) AS total_net_salary,
                       COALESCE(SUM(total_deductions), 0) AS total_deductions,
                       COALESCE(SUM(total_benefits), 0) AS total_benefits
                FROM payroll_records
                WHERE pay_period_id=%s
                """,
                (int(pay_period_id),),
            )
            r = fetchone(cur) or {}
            return PayrollSummary(
                pay_period_id=int(pay_period_id),
                employee_count=int(r.get("employee_count") or 0),
                total_gross_income=as_decimal(r.get("total_gross_income")),
                total_net_salary=as_decimal(r.get("total_net_salary")),
                total_deductions=as_decimal(r.get("total_deductions")),
                total_benefits=as_decimal(r.get("total_benefits")),
            )


class MySQLReferenceDataRepository(ReferenceDataRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def benefits_for_position(self, position_id: int) -> Sequence[PositionBenefit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT position_id, benefit_name, benefit_value
                FROM position_benefits
                WHERE position_id=%s
                ORDER BY benefit_id
                """,
                (int(position_id),),
            )
            return [
                PositionBenefit(int(r["position_id"]), r["benefit_name"], as_decimal(r["benefit_value"]))
                for r in fetchall(cur)
            ]
