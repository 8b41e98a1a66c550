from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import TardinessType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, TardinessRecord
from .repository import AttendanceRepository, TardinessRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, time_in, time_out
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, time_in, time_out
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, time_in, time_out
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY employee_id
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_time_in(self, *, employee_id: int, work_date: date, time_in: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # the (employee_id, work_date) unique key turns a concurrent duplicate into a no-op
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(employee_id, work_date, time_in)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), work_date, time_in),
            )
            if cur.rowcount == 0:
                return 0
            return int(cur.lastrowid)

    def update_time_out(self, *, attendance_id: int, time_out: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET time_out=%s
                WHERE attendance_id=%s AND time_out IS NULL
                """,
                (time_out, int(attendance_id)),
            )
            return cur.rowcount > 0


class MySQLTardinessRepository(TardinessRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        attendance_id: int,
        tardiness_hours: Decimal,
        tardiness_type: TardinessType,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tardiness_records(attendance_id, tardiness_hours, tardiness_type, note)
                VALUES(%s,%s,%s,%s)
                """,
                (int(attendance_id), tardiness_hours, tardiness_type.value, note),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[TardinessRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.tardiness_id, t.attendance_id, t.tardiness_hours,
                       t.tardiness_type, t.note, t.created_at
                FROM tardiness_records t
                JOIN attendance_records a ON a.attendance_id = t.attendance_id
                WHERE a.employee_id=%s AND a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date, t.tardiness_id
                """,
                (int(employee_id), start_date, end_date),
            )
            return [
                TardinessRecord(
                    tardiness_id=int(r["tardiness_id"]),
                    attendance_id=int(r["attendance_id"]),
                    tardiness_hours=as_decimal(r["tardiness_hours"]),
                    tardiness_type=TardinessType(r["tardiness_type"]),
                    note=r.get("note"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
