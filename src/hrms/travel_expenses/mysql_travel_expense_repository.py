from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, to_date, to_decimal
from .model import ExpenseItem, NewTravelExpense, TravelExpense
from .repository import TravelExpenseRepository

_SELECT = """
    SELECT te.id, te.employee_id, te.travel_date, te.destination, te.travel_purpose, te.total_amount,
           te.status, te.submitted_to, te.submitted_by, te.approved_by, te.comment, te.receipt_path,
           te.created_at, u.name AS employee_name, u.department_id
    FROM travel_expenses te
    LEFT JOIN hrms_users u ON u.employee_id = te.employee_id
"""

UPDATABLE_COLUMNS = ("travel_date", "destination", "travel_purpose", "total_amount", "receipt_path")


def _row_to_expense(r: dict, items: Sequence[ExpenseItem] = ()) -> TravelExpense:
    return TravelExpense(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        travel_date=to_date(r["travel_date"]),
        destination=r["destination"],
        travel_purpose=r["travel_purpose"],
        total_amount=to_decimal(r["total_amount"]),
        status=RequestStatus(r["status"]),
        submitted_to=r["submitted_to"],
        submitted_by=r["submitted_by"],
        employee_name=r.get("employee_name"),
        department_id=r.get("department_id"),
        approved_by=r.get("approved_by"),
        comment=r.get("comment"),
        receipt_path=r.get("receipt_path"),
        created_at=r.get("created_at"),
        items=tuple(items),
    )


def _insert_items(cur, expense_id: int, items: Sequence[ExpenseItem]) -> None:
    for item in items:
        cur.execute(
            "INSERT INTO expense_items (travel_expense_id, expense_date, purpose, amount) VALUES (%s, %s, %s, %s)",
            (expense_id, item.expense_date, item.purpose, item.amount),
        )


class MySQLTravelExpenseRepository(TravelExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _items_for(self, cur, expense_ids: Sequence[int]) -> Dict[int, List[ExpenseItem]]:
        grouped: Dict[int, List[ExpenseItem]] = {i: [] for i in expense_ids}
        if not expense_ids:
            return grouped
        cur.execute(
            f"""
            SELECT id, travel_expense_id, expense_date, purpose, amount
            FROM expense_items
            WHERE travel_expense_id IN ({', '.join(['%s'] * len(expense_ids))})
            ORDER BY expense_date, id
            """,
            tuple(expense_ids),
        )
        for r in fetchall(cur):
            grouped[int(r["travel_expense_id"])].append(
                ExpenseItem(
                    id=int(r["id"]),
                    expense_date=to_date(r["expense_date"]),
                    purpose=r["purpose"],
                    amount=to_decimal(r["amount"]),
                )
            )
        return grouped

    def create(self, expense: NewTravelExpense) -> int:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO travel_expenses
                    (employee_id, travel_date, destination, travel_purpose, total_amount, status,
                     submitted_to, submitted_by, approved_by, receipt_path)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    expense.employee_id,
                    expense.travel_date,
                    expense.destination,
                    expense.travel_purpose,
                    expense.total_amount,
                    expense.status.value,
                    expense.submitted_to,
                    expense.submitted_by,
                    expense.approved_by,
                    expense.receipt_path,
                ),
            )
            expense_id = int(cur.lastrowid)
            _insert_items(cur, expense_id, expense.items)
            return expense_id

    def get(self, expense_id: int) -> Optional[TravelExpense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE te.id=%s", (expense_id,))
            row = fetchone(cur)
            if not row:
                return None
            return _row_to_expense(row, self._items_for(cur, [int(row["id"])])[int(row["id"])])

    def list_expenses(
        self,
        *,
        statuses: Sequence[RequestStatus],
        employee_id: Optional[str] = None,
        department_id: Optional[int] = None,
        submitted_to: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[TravelExpense], int]:
        clauses = [f"te.status IN ({', '.join(['%s'] * len(statuses))})"]
        params: list = [s.value for s in statuses]
        if employee_id:
            clauses.append("te.employee_id=%s")
            params.append(employee_id)
        if department_id:
            clauses.append("u.department_id=%s")
            params.append(int(department_id))
        if submitted_to:
            clauses.append("te.submitted_to=%s")
            params.append(submitted_to)
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS n FROM travel_expenses te
                LEFT JOIN hrms_users u ON u.employee_id = te.employee_id
                WHERE {where}
                """,
                tuple(params),
            )
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY te.created_at DESC, te.id DESC LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), (int(page) - 1) * int(limit)),
            )
            rows = fetchall(cur)
            items = self._items_for(cur, [int(r["id"]) for r in rows])
            return [_row_to_expense(r, items[int(r["id"])]) for r in rows], total

    def update_pending(
        self,
        *,
        expense_id: int,
        fields: Mapping[str, object],
        items: Optional[Sequence[ExpenseItem]] = None,
    ) -> bool:
        cols = [c for c in UPDATABLE_COLUMNS if c in fields]
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM travel_expenses WHERE id=%s AND status=%s FOR UPDATE",
                (expense_id, RequestStatus.PENDING.value),
            )
            if not fetchone(cur):
                return False
            if cols:
                cur.execute(
                    f"UPDATE travel_expenses SET {', '.join(f'{c}=%s' for c in cols)} WHERE id=%s",
                    tuple(fields[c] for c in cols) + (expense_id,),
                )
            if items is not None:
                cur.execute("DELETE FROM expense_items WHERE travel_expense_id=%s", (expense_id,))
                _insert_items(cur, expense_id, items)
            return True

    def delete_pending(self, expense_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM travel_expenses WHERE id=%s AND status=%s",
                (expense_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def decide(self, *, expense_id: int, status: RequestStatus, approved_by: str, comment: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE travel_expenses SET status=%s, approved_by=%s, comment=%s
                WHERE id=%s AND status=%s
                """,
                (status.value, approved_by, comment, expense_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def count_pending(self, *, submitted_to: Optional[str] = None) -> int:
        sql = "SELECT COUNT(*) AS n FROM travel_expenses WHERE status=%s"
        params: list = [RequestStatus.PENDING.value]
        if submitted_to:
            sql += " AND submitted_to=%s"
            params.append(submitted_to)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
