from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, to_date, to_decimal
from .model import ApprovalOutcome, Leave, LeaveBalance
from .repository import LeaveRepository

_LEAVE_COLUMNS = """
    id, employee_id, leave_type, start_date, end_date, is_half_day, total_days, reason,
    status, leave_status, recipient, approved_by, comment, created_at
"""


def _row_to_leave(r: dict) -> Leave:
    return Leave(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        leave_type=LeaveType(r["leave_type"]),
        start_date=to_date(r["start_date"]),
        end_date=to_date(r["end_date"]),
        total_days=to_decimal(r["total_days"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        leave_status=r["leave_status"],
        recipient=r["recipient"],
        is_half_day=bool(r.get("is_half_day")),
        approved_by=r.get("approved_by"),
        comment=r.get("comment"),
        created_at=r.get("created_at"),
    )


def _row_to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        employee_id=r["employee_id"],
        leave_type=LeaveType(r["leave_type"]),
        year=int(r["year"]),
        allocated=to_decimal(r["allocated"]),
        used=to_decimal(r["used"]),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(
        self,
        *,
        employee_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        is_half_day: bool,
        total_days: Decimal,
        reason: str,
        leave_status: str,
        recipient: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves
                    (employee_id, leave_type, start_date, end_date, is_half_day, total_days,
                     reason, status, leave_status, recipient)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    employee_id,
                    leave_type.value,
                    start_date,
                    end_date,
                    1 if is_half_day else 0,
                    total_days,
                    reason,
                    RequestStatus.PENDING.value,
                    leave_status,
                    recipient,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, *, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE id=%s", (leave_id,))
            row = fetchone(cur)
            return _row_to_leave(row) if row else None

    def list_leaves(
        self,
        *,
        employee_id: Optional[str] = None,
        recipient: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[Leave]:
        clauses = ["1=1"]
        params: list = []
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if recipient:
            clauses.append("recipient=%s")
            params.append(recipient)
        if status:
            clauses.append("status=%s")
            params.append(status.value)
        if end:
            clauses.append("start_date<=%s")
            params.append(end)
        if start:
            clauses.append("end_date>=%s")
            params.append(start)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def has_overlap(self, *, employee_id: str, start_date: date, end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 FROM leaves
                WHERE employee_id=%s
                  AND status IN (%s, %s)
                  AND start_date<=%s AND end_date>=%s
                LIMIT 1
                """,
                (employee_id, RequestStatus.PENDING.value, RequestStatus.APPROVED.value, end_date, start_date),
            )
            return fetchone(cur) is not None

    def get_balance(self, *, employee_id: str, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, year, allocated, used
                FROM leave_balances
                WHERE employee_id=%s AND leave_type=%s AND year=%s
                """,
                (employee_id, leave_type.value, year),
            )
            row = fetchone(cur)
            return _row_to_balance(row) if row else None

    def list_balances(self, *, year: int, employee_id: Optional[str] = None) -> Sequence[LeaveBalance]:
        sql = "SELECT employee_id, leave_type, year, allocated, used FROM leave_balances WHERE year=%s"
        params: list = [year]
        if employee_id:
            sql += " AND employee_id=%s"
            params.append(employee_id)
        sql += " ORDER BY employee_id, leave_type"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_balance(r) for r in fetchall(cur)]

    def approve_leave(
        self,
        *,
        leave_id: int,
        approved_by: str,
        comment: Optional[str],
        attendance_days: Sequence[date],
    ) -> ApprovalOutcome:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE id=%s FOR UPDATE", (leave_id,))
            row = fetchone(cur)
            if not row or row["status"] != RequestStatus.PENDING.value:
                return ApprovalOutcome.NOT_PENDING
            leave = _row_to_leave(row)

            if leave.leave_type.is_paid:
                cur.execute(
                    """
                    SELECT allocated, used FROM leave_balances
                    WHERE employee_id=%s AND leave_type=%s AND year=%s
                    FOR UPDATE
                    """,
                    (leave.employee_id, leave.leave_type.value, leave.start_date.year),
                )
                bal = fetchone(cur)
                remaining = to_decimal(bal["allocated"]) - to_decimal(bal["used"]) if bal else Decimal("0")
                if remaining < leave.total_days:
                    return ApprovalOutcome.INSUFFICIENT_BALANCE
                cur.execute(
                    """
                    UPDATE leave_balances SET used = used + %s
                    WHERE employee_id=%s AND leave_type=%s AND year=%s
                    """,
                    (leave.total_days, leave.employee_id, leave.leave_type.value, leave.start_date.year),
                )

            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by=%s, comment=%s
                WHERE id=%s AND status=%s
                """,
                (RequestStatus.APPROVED.value, approved_by, comment, leave_id, RequestStatus.PENDING.value),
            )

            for day in attendance_days:
                cur.execute(
                    "SELECT id, status FROM attendance WHERE employee_id=%s AND date=%s FOR UPDATE",
                    (leave.employee_id, day),
                )
                existing = fetchone(cur)
                if existing and existing["status"] == AttendanceStatus.PRESENT.value:
                    continue
                if existing:
                    cur.execute(
                        """
                        UPDATE attendance
                        SET status=%s, approval_status=%s, approved_by=%s, leave_id=%s
                        WHERE id=%s
                        """,
                        (
                            AttendanceStatus.LEAVE.value,
                            RequestStatus.APPROVED.value,
                            approved_by,
                            leave_id,
                            existing["id"],
                        ),
                    )
                else:
                    cur.execute(
                        """
                        INSERT INTO attendance
                            (employee_id, date, status, approval_status, recipient, approved_by, leave_id)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            leave.employee_id,
                            day,
                            AttendanceStatus.LEAVE.value,
                            RequestStatus.APPROVED.value,
                            leave.recipient,
                            approved_by,
                            leave_id,
                        ),
                    )
            return ApprovalOutcome.APPLIED

    def reject_leave(self, *, leave_id: int, approved_by: str, comment: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by=%s, comment=%s
                WHERE id=%s AND status=%s
                """,
                (RequestStatus.REJECTED.value, approved_by, comment, leave_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_pending_leave(self, *, leave_id: int, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM leaves WHERE id=%s AND employee_id=%s AND status=%s",
                (leave_id, employee_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def count_pending(self, *, recipient: Optional[str] = None) -> int:
        sql = "SELECT COUNT(*) AS n FROM leaves WHERE status=%s"
        params: list = [RequestStatus.PENDING.value]
        if recipient:
            sql += " AND recipient=%s"
            params.append(recipient)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
