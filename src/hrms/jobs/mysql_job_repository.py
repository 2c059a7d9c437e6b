from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..core.enums import EmployeeStatus, JobStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchone
from .repository import JobRepository

_UPSERT_RUN = """
    INSERT INTO job_runs (job_name, period_key, status, detail)
    VALUES (%s, %s, %s, %s)
    ON DUPLICATE KEY UPDATE
        detail = IF(status = 'COMPLETED', detail, VALUES(detail)),
        ran_at = IF(status = 'COMPLETED', ran_at, CURRENT_TIMESTAMP),
        status = IF(status = 'COMPLETED', status, VALUES(status))
"""


class MySQLJobRepository(JobRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def has_run(self, *, job_name: str, period_key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS x FROM job_runs WHERE job_name=%s AND period_key=%s AND status=%s",
                (job_name, period_key, JobStatus.COMPLETED.value),
            )
            return fetchone(cur) is not None

    def record_run(self, *, job_name: str, period_key: str, status: JobStatus, detail: str = "") -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_RUN, (job_name, period_key, status.value, detail[:500]))

    def allocate_monthly(
        self,
        *,
        job_name: str,
        period_key: str,
        year: int,
        allocation: Mapping[LeaveType, Decimal],
    ) -> Optional[int]:
        with db_transaction(self._conn_factory) as (_, cur):
            # Claim the ledger key first so a concurrent run blocks on it.
            # The placeholder disappears with the rollback if anything below fails.
            cur.execute(
                "INSERT IGNORE INTO job_runs (job_name, period_key, status, detail) VALUES (%s, %s, %s, 'running')",
                (job_name, period_key, JobStatus.FAILED.value),
            )
            cur.execute(
                "SELECT status FROM job_runs WHERE job_name=%s AND period_key=%s FOR UPDATE",
                (job_name, period_key),
            )
            row = fetchone(cur)
            if row and row["status"] == JobStatus.COMPLETED.value:
                return None

            cur.execute(
                "SELECT COUNT(*) AS n FROM hrms_users WHERE status=%s",
                (EmployeeStatus.ACTIVE.value,),
            )
            count_row = fetchone(cur)
            credited = int(count_row["n"]) if count_row else 0

            for leave_type, days in allocation.items():
                cur.execute(
                    """
                    INSERT INTO leave_balances (employee_id, leave_type, year, allocated, used)
                    SELECT employee_id, %s, %s, %s, 0 FROM hrms_users WHERE status=%s
                    ON DUPLICATE KEY UPDATE allocated = allocated + %s
                    """,
                    (leave_type.value, year, days, EmployeeStatus.ACTIVE.value, days),
                )

            cur.execute(
                """
                UPDATE job_runs SET status=%s, detail=%s, ran_at=CURRENT_TIMESTAMP
                WHERE job_name=%s AND period_key=%s
                """,
                (JobStatus.COMPLETED.value, f"credited {credited} employee(s)", job_name, period_key),
            )
            return credited

    def delete_audit_before(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM audit_logs WHERE created_at < %s", (cutoff,))
            return cur.rowcount
