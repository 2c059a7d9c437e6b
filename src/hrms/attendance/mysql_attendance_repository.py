from __future__ import annotations

from datetime import date, time
from typing import Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, RequestStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, to_date
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, date, login_time, logout_time, status, approval_status, recipient, approved_by, leave_id"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        date=to_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        approval_status=RequestStatus(r["approval_status"]),
        recipient=r["recipient"],
        login_time=normalize_mysql_time(r.get("login_time")),
        logout_time=normalize_mysql_time(r.get("logout_time")),
        approved_by=r.get("approved_by"),
        leave_id=int(r["leave_id"]) if r.get("leave_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (record_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_for_employee_and_date(self, employee_id: str, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND date=%s",
                (employee_id, day),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def create(
        self,
        *,
        employee_id: str,
        day: date,
        login_time: time,
        logout_time: Optional[time],
        status: AttendanceStatus,
        recipient: str,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance (employee_id, date, login_time, logout_time, status, approval_status, recipient)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (employee_id, day, login_time, logout_time, status.value, RequestStatus.PENDING.value, recipient),
                )
                return int(cur.lastrowid)
        except IntegrityError:
            # uq_attendance_employee_date: a concurrent request marked the day first
            raise ValidationError("Attendance already marked for this date") from None

    def set_logout(self, *, record_id: int, logout_time: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET logout_time=%s WHERE id=%s AND logout_time IS NULL",
                (logout_time, record_id),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date DESC
                """,
                (employee_id, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_records(
        self,
        *,
        recipient: Optional[str] = None,
        day: Optional[date] = None,
        employee_id: Optional[str] = None,
        approval_status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list = []
        if recipient:
            clauses.append("recipient=%s")
            params.append(recipient)
        if day:
            clauses.append("date=%s")
            params.append(day)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if approval_status:
            clauses.append("approval_status=%s")
            params.append(approval_status.value)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE {' AND '.join(clauses)}
                ORDER BY date DESC, id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def decide(self, *, record_id: int, status: RequestStatus, approved_by: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance SET approval_status=%s, approved_by=%s
                WHERE id=%s AND approval_status=%s
                """,
                (status.value, approved_by, record_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def status_tally(self, employee_id: str, start: date, end: date) -> Dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n FROM attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s AND approval_status<>%s
                GROUP BY status
                """,
                (employee_id, start, end, RequestStatus.REJECTED.value),
            )
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}

    def count_pending(self, *, recipient: Optional[str] = None) -> int:
        sql = "SELECT COUNT(*) AS n FROM attendance WHERE approval_status=%s"
        params: list = [RequestStatus.PENDING.value]
        if recipient:
            sql += " AND recipient=%s"
            params.append(recipient)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
