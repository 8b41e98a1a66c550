from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveBalance, LeaveType
from .repository import LeaveBalanceRepository, LeaveTypeRepository

_BALANCE_COLUMNS = """
    balance_id, employee_id, leave_type_id, balance_year,
    total_days, used_days, carry_over_days, remaining_days
"""


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["balance_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        balance_year=int(r["balance_year"]),
        total_days=int(r["total_days"] or 0),
        used_days=int(r["used_days"] or 0),
        carry_over_days=int(r["carry_over_days"] or 0),
        remaining_days=int(r["remaining_days"] or 0),
    )


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT leave_type_id, leave_type_name, max_days_per_year FROM leave_types WHERE leave_type_id=%s",
                (int(leave_type_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveType(int(r["leave_type_id"]), r["leave_type_name"], r.get("max_days_per_year"))

    def list_all(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT leave_type_id, leave_type_name, max_days_per_year FROM leave_types ORDER BY leave_type_id")
            return [
                LeaveType(int(r["leave_type_id"]), r["leave_type_name"], r.get("max_days_per_year"))
                for r in fetchall(cur)
            ]


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS}
                FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND balance_year=%s
                """,
                (int(employee_id), int(leave_type_id), int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS}
                FROM leave_balances
                WHERE employee_id=%s AND balance_year=%s
                ORDER BY leave_type_id
                """,
                (int(employee_id), int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def create_if_absent(self, *, employee_id: int, leave_type_id: int, year: int, total_days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO leave_balances(
                    employee_id, leave_type_id, balance_year,
                    total_days, used_days, carry_over_days, remaining_days
                )
                VALUES(%s,%s,%s,%s,0,0,%s)
                """,
                (int(employee_id), int(leave_type_id), int(year), int(total_days), int(total_days)),
            )
            return cur.rowcount > 0

    def add_used_days(self, *, balance_id: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # MySQL applies single-table SET assignments left to right,
            # so remaining_days sees the incremented used_days.
            cur.execute(
                """
                UPDATE leave_balances
                SET used_days = used_days + %s,
                    remaining_days = total_days + carry_over_days - used_days
                WHERE balance_id=%s
                """,
                (int(days), int(balance_id)),
            )
            return cur.rowcount > 0
