from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence, Tuple

from mysql.connector.errors import IntegrityError

from ..core.constants import JOB_MONTHLY_LEAVE_ALLOCATION
from ..core.enums import EmployeeStatus, JobStatus, LeaveType, RequestStatus, Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, to_date, to_decimal
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_SELECT = """
    SELECT u.id, u.employee_id, u.name, u.mobile, u.email, u.role, u.department_id,
           d.name AS department_name, u.designation, u.basic_salary, u.allowances, u.bonuses,
           u.joining_date, u.status, u.is_temporary_password, u.termination_reason,
           u.termination_date, u.photo_path
    FROM hrms_users u
    LEFT JOIN departments d ON d.id = u.department_id
"""

# Columns an update may touch; anything else is ignored.
UPDATABLE_COLUMNS = (
    "name",
    "mobile",
    "email",
    "department_id",
    "designation",
    "basic_salary",
    "allowances",
    "bonuses",
    "joining_date",
)


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        name=r["name"],
        mobile=r["mobile"],
        role=Role(r["role"]),
        email=r.get("email"),
        department_id=r.get("department_id"),
        department_name=r.get("department_name"),
        designation=r.get("designation"),
        basic_salary=to_decimal(r.get("basic_salary")),
        allowances=to_decimal(r.get("allowances")),
        bonuses=to_decimal(r.get("bonuses")),
        joining_date=to_date(r.get("joining_date")),
        status=EmployeeStatus(r.get("status") or "active"),
        is_temporary_password=bool(r.get("is_temporary_password")),
        termination_reason=r.get("termination_reason"),
        termination_date=to_date(r.get("termination_date")),
        photo_path=r.get("photo_path"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self._get_one("u.id=%s", (user_id,))

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return self._get_one("u.employee_id=%s", (employee_id,))

    def get_by_mobile_role(self, mobile: str, role: Role) -> Optional[Employee]:
        return self._get_one("u.mobile=%s AND u.role=%s", (mobile, role.value))

    def get_password_hash(self, user_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT password FROM hrms_users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return row["password"] if row else None

    def update_password(self, *, user_id: int, password_hash: str, is_temporary: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE hrms_users SET password=%s, is_temporary_password=%s WHERE id=%s",
                (password_hash, 1 if is_temporary else 0, user_id),
            )
            return cur.rowcount > 0

    def next_employee_id(self) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(MAX(CAST(SUBSTRING(employee_id, 4) AS UNSIGNED)), 0) AS n
                FROM hrms_users
                WHERE employee_id REGEXP '^EMP[0-9]+$'
                """
            )
            row = fetchone(cur)
            return f"EMP{int(row['n'] if row else 0) + 1:04d}"

    def create_employee(
        self,
        *,
        new: NewEmployee,
        password_hash: str,
        leave_allocation: Mapping[LeaveType, Decimal],
        allocation_year: int,
        allocation_period: str,
    ) -> int:
        try:
            with db_transaction(self._conn_factory) as (_, cur):
                # Lock the ledger row so a running allocation either already
                # counted this month or will see the new user as active.
                cur.execute(
                    "SELECT status FROM job_runs WHERE job_name=%s AND period_key=%s FOR UPDATE",
                    (JOB_MONTHLY_LEAVE_ALLOCATION, allocation_period),
                )
                ledger = fetchone(cur)
                allocated = bool(ledger and ledger["status"] == JobStatus.COMPLETED.value)

                cur.execute(
                    """
                    INSERT INTO hrms_users
                        (employee_id, name, mobile, email, role, password, is_temporary_password,
                         department_id, designation, basic_salary, allowances, bonuses, joining_date)
                    VALUES (%s, %s, %s, %s, %s, %s, 1, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        new.employee_id,
                        new.name,
                        new.mobile,
                        new.email,
                        new.role.value,
                        password_hash,
                        new.department_id,
                        new.designation,
                        new.basic_salary,
                        new.allowances,
                        new.bonuses,
                        new.joining_date,
                    ),
                )
                user_id = int(cur.lastrowid)
                for leave_type, days in leave_allocation.items():
                    cur.execute(
                        """
                        INSERT INTO leave_balances (employee_id, leave_type, year, allocated, used)
                        VALUES (%s, %s, %s, %s, 0)
                        ON DUPLICATE KEY UPDATE allocated = allocated + VALUES(allocated)
                        """,
                        (new.employee_id, leave_type.value, allocation_year, days if allocated else Decimal("0")),
                    )
                return user_id
        except IntegrityError as exc:
            if "uq_users_mobile_role" in str(exc):
                raise ValidationError("An account with this mobile and role already exists") from None
            raise ValidationError("Employee ID already exists") from None

    def list_employees(
        self,
        *,
        role: Optional[Role] = None,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[Employee], int]:
        clauses = ["1=1"]
        params: list = []
        if role:
            clauses.append("u.role=%s")
            params.append(role.value)
        if department_id:
            clauses.append("u.department_id=%s")
            params.append(int(department_id))
        if status:
            clauses.append("u.status=%s")
            params.append(status.value)
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM hrms_users u WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY u.employee_id LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), (int(page) - 1) * int(limit)),
            )
            return [_row_to_employee(r) for r in fetchall(cur)], total

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE u.status=%s ORDER BY u.employee_id", (EmployeeStatus.ACTIVE.value,))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def update_employee(self, *, user_id: int, fields: Mapping[str, object]) -> bool:
        cols = [c for c in UPDATABLE_COLUMNS if c in fields]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE hrms_users SET {assignments} WHERE id=%s",
                tuple(fields[c] for c in cols) + (user_id,),
            )
            return cur.rowcount > 0

    def set_photo(self, *, employee_id: str, photo_path: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE hrms_users SET photo_path=%s WHERE employee_id=%s", (photo_path, employee_id))
            return cur.rowcount > 0

    def terminate(self, *, employee_id: str, reason: str, termination_date: date, actor_id: str) -> bool:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE hrms_users
                SET status=%s, termination_reason=%s, termination_date=%s
                WHERE employee_id=%s AND status=%s
                """,
                (EmployeeStatus.INACTIVE.value, reason, termination_date, employee_id, EmployeeStatus.ACTIVE.value),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(
                "UPDATE leaves SET status=%s, approved_by=%s, comment=%s WHERE employee_id=%s AND status=%s",
                (RequestStatus.REJECTED.value, actor_id, "Employee terminated", employee_id, RequestStatus.PENDING.value),
            )
            leaves_rejected = cur.rowcount
            cur.execute(
                """
                UPDATE travel_expenses SET status=%s, approved_by=%s, comment=%s
                WHERE employee_id=%s AND status=%s
                """,
                (RequestStatus.REJECTED.value, actor_id, "Employee terminated", employee_id, RequestStatus.PENDING.value),
            )
            expenses_rejected = cur.rowcount
            cur.execute(
                """
                INSERT INTO audit_logs (actor_id, action, target_type, target_id, detail)
                VALUES (%s, 'terminate', 'employee', %s, %s)
                """,
                (
                    actor_id,
                    employee_id,
                    f"reason={reason}; leaves_rejected={leaves_rejected}; expenses_rejected={expenses_rejected}",
                ),
            )
            return True

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM hrms_users WHERE status=%s", (EmployeeStatus.ACTIVE.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
