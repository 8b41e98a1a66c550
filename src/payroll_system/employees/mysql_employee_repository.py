from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, basic_salary, hourly_rate, status, role,
    supervisor_id, position_id, department_id
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        basic_salary=as_decimal(r["basic_salary"]),
        hourly_rate=as_decimal(r["hourly_rate"]),
        status=EmployeeStatus(r["status"]),
        role=Role(r["role"]),
        supervisor_id=r.get("supervisor_id"),
        position_id=r.get("position_id"),
        department_id=r.get("department_id"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_status(self, status: EmployeeStatus) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE status=%s ORDER BY employee_id",
                (status.value,),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_supervisor(self, supervisor_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE supervisor_id=%s ORDER BY employee_id",
                (int(supervisor_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE department_id=%s ORDER BY employee_id",
                (int(department_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update_salary(self, employee_id: int, *, basic_salary: Decimal, hourly_rate: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET basic_salary=%s, hourly_rate=%s WHERE employee_id=%s",
                (basic_salary, hourly_rate, int(employee_id)),
            )
            if cur.rowcount > 0:
                return True
            # rowcount is 0 when the values did not change
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee_id),))
            return fetchone(cur) is not None
