from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date, to_decimal
from .model import MonthSummary, PayrollBreakdown, PayrollRecord
from .repository import PayrollRepository

_BREAKDOWN_COLUMNS = tuple(PayrollBreakdown.__dataclass_fields__)
_SUMMARY_COLUMNS = tuple(MonthSummary.__dataclass_fields__)
_COLUMNS = (
    ("id", "employee_id", "employee_name", "department", "designation_name", "month")
    + _BREAKDOWN_COLUMNS
    + _SUMMARY_COLUMNS
    + ("status", "payment_method", "payment_date", "created_by")
)


def _row_to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        month=r["month"],
        breakdown=PayrollBreakdown(**{c: to_decimal(r[c]) for c in _BREAKDOWN_COLUMNS}),
        summary=MonthSummary(
            paid_leave_days=to_decimal(r["paid_leave_days"]),
            unpaid_leave_days=to_decimal(r["unpaid_leave_days"]),
            present_days=int(r["present_days"]),
            holidays=int(r["holidays"]),
            total_working_days=int(r["total_working_days"]),
        ),
        status=PayrollStatus(r["status"]),
        payment_method=r["payment_method"],
        department=r.get("department"),
        designation_name=r.get("designation_name"),
        payment_date=to_date(r.get("payment_date")),
        created_by=r.get("created_by"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, employee_id: str, month: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM payroll WHERE employee_id=%s AND month=%s",
                (employee_id, month),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def insert(self, record: PayrollRecord) -> bool:
        values = {
            "employee_id": record.employee_id,
            "employee_name": record.employee_name,
            "department": record.department,
            "designation_name": record.designation_name,
            "month": record.month,
            "status": record.status.value,
            "payment_method": record.payment_method,
            "payment_date": record.payment_date,
            "created_by": record.created_by,
        }
        values.update({c: getattr(record.breakdown, c) for c in _BREAKDOWN_COLUMNS})
        values.update({c: getattr(record.summary, c) for c in _SUMMARY_COLUMNS})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT IGNORE INTO payroll ({', '.join(values)})
                VALUES ({', '.join(['%s'] * len(values))})
                """,
                tuple(values.values()),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        month: Optional[str] = None,
        employee_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[PayrollRecord], int]:
        clauses = ["1=1"]
        params: list = []
        if month:
            clauses.append("month=%s")
            params.append(month)
        if employee_id:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM payroll WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {', '.join(_COLUMNS)} FROM payroll
                WHERE {where}
                ORDER BY month DESC, employee_id
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), (int(page) - 1) * int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total

    def list_for_month(self, month: str) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM payroll WHERE month=%s ORDER BY employee_id",
                (month,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
