from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, OvertimeRequest
from .repository import LeaveRequestRepository, OvertimeRequestRepository

_LEAVE_COLUMNS = """
    request_id, employee_id, leave_type_id, start_date, end_date, reason,
    status, created_at, decided_by, decided_at, supervisor_notes
"""

_OVERTIME_COLUMNS = """
    request_id, employee_id, overtime_start, overtime_end, reason,
    status, created_at, decided_by, decided_at, supervisor_notes
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason") or "",
        status=ApprovalStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        supervisor_notes=r.get("supervisor_notes"),
    )


def _to_overtime(r: dict) -> OvertimeRequest:
    return OvertimeRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        overtime_start=r["overtime_start"],
        overtime_end=r["overtime_end"],
        reason=r.get("reason") or "",
        status=ApprovalStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        supervisor_notes=r.get("supervisor_notes"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(leave_type_id), start_date, end_date, reason, ApprovalStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE employee_id=%s ORDER BY start_date DESC",
                (int(employee_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_in_range(self, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leave_requests
                WHERE start_date <= %s AND end_date >= %s
                ORDER BY start_date
                """,
                (end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leave_requests WHERE status=%s ORDER BY created_at",
                (ApprovalStatus.PENDING.value,),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, supervisor_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    supervisor_notes,
                    int(request_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def approve_with_usage(
        self,
        *,
        request_id: int,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str],
        balance_id: int,
        days: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, supervisor_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    ApprovalStatus.APPROVED.value,
                    int(decided_by),
                    decided_at,
                    supervisor_notes,
                    int(request_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False

            cur.execute(
                """
                UPDATE leave_balances
                SET used_days = used_days + %s,
                    remaining_days = total_days + carry_over_days - used_days
                WHERE balance_id=%s
                """,
                (int(days), int(balance_id)),
            )
            if cur.rowcount == 0:
                # raising inside db_cursor rolls back the status update
                raise StorageError(f"Leave balance not found: {balance_id}")
            return True


class MySQLOvertimeRequestRepository(OvertimeRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        overtime_start: datetime,
        overtime_end: datetime,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_requests(employee_id, overtime_start, overtime_end, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), overtime_start, overtime_end, reason, ApprovalStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_OVERTIME_COLUMNS} FROM overtime_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_overtime(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_OVERTIME_COLUMNS} FROM overtime_requests WHERE employee_id=%s ORDER BY overtime_start DESC",
                (int(employee_id),),
            )
            return [_to_overtime(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        *,
        employee_id: Optional[int] = None,
        status: Optional[ApprovalStatus] = None,
    ) -> Sequence[OvertimeRequest]:
        clauses = ["overtime_start BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_OVERTIME_COLUMNS} FROM overtime_requests WHERE {where} ORDER BY overtime_start",
                tuple(params),
            )
            return [_to_overtime(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_OVERTIME_COLUMNS} FROM overtime_requests WHERE status=%s ORDER BY created_at",
                (ApprovalStatus.PENDING.value,),
            )
            return [_to_overtime(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        supervisor_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_requests
                SET status=%s, decided_by=%s, decided_at=%s, supervisor_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    supervisor_notes,
                    int(request_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
