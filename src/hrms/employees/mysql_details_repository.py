from __future__ import annotations

from dataclasses import asdict
from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import BankDetails, EducationDetails, EmployeeDocument, PersonalDetails
from .repository import EmployeeDetailsRepository

_PERSONAL_FIELDS = tuple(f for f in PersonalDetails.__dataclass_fields__ if f != "employee_id")
_EDUCATION_FIELDS = tuple(f for f in EducationDetails.__dataclass_fields__ if f != "employee_id")
_BANK_FIELDS = ("bank_account_number", "ifsc_number")


class MySQLEmployeeDetailsRepository(EmployeeDetailsRepository):
    """personal_details, bank_details, education_details and employee_documents."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, table: str, columns: Sequence[str], employee_id: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT employee_id, {', '.join(columns)} FROM {table} WHERE employee_id=%s",
                (employee_id,),
            )
            return fetchone(cur)

    def _insert(self, table: str, values: Mapping[str, object], created_by: str) -> None:
        cols = list(values) + ["created_by"]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(values.values()) + (created_by,),
            )

    def _update(self, table: str, allowed: Sequence[str], employee_id: str, fields: Mapping[str, object]) -> bool:
        cols = [c for c in allowed if c in fields]
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table} SET {', '.join(f'{c}=%s' for c in cols)} WHERE employee_id=%s",
                tuple(fields[c] for c in cols) + (employee_id,),
            )
            return cur.rowcount > 0

    def get_personal(self, employee_id: str) -> Optional[PersonalDetails]:
        row = self._select_one("personal_details", _PERSONAL_FIELDS, employee_id)
        if not row:
            return None
        row["joining_date"] = to_date(row.get("joining_date"))
        row["contract_end_date"] = to_date(row.get("contract_end_date"))
        return PersonalDetails(**row)

    def create_personal(self, details: PersonalDetails, *, created_by: str) -> None:
        self._insert("personal_details", asdict(details), created_by)

    def update_personal(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        return self._update("personal_details", _PERSONAL_FIELDS, employee_id, fields)

    def get_bank(self, employee_id: str) -> Optional[BankDetails]:
        row = self._select_one("bank_details", _BANK_FIELDS, employee_id)
        return BankDetails(**row) if row else None

    def create_bank(self, details: BankDetails, *, created_by: str) -> None:
        self._insert("bank_details", asdict(details), created_by)

    def update_bank(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        return self._update("bank_details", _BANK_FIELDS, employee_id, fields)

    def get_education(self, employee_id: str) -> Optional[EducationDetails]:
        row = self._select_one("education_details", _EDUCATION_FIELDS, employee_id)
        return EducationDetails(**row) if row else None

    def create_education(self, details: EducationDetails, *, created_by: str) -> None:
        self._insert("education_details", asdict(details), created_by)

    def update_education(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        return self._update("education_details", _EDUCATION_FIELDS, employee_id, fields)

    def list_documents(self, employee_id: str) -> Sequence[EmployeeDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, doc_type, file_path, original_name
                FROM employee_documents
                WHERE employee_id=%s
                ORDER BY doc_type
                """,
                (employee_id,),
            )
            return [EmployeeDocument(**r) for r in fetchall(cur)]

    def upsert_document(self, document: EmployeeDocument, *, uploaded_by: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_documents (employee_id, doc_type, file_path, original_name, uploaded_by)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE file_path=VALUES(file_path), original_name=VALUES(original_name),
                                        uploaded_by=VALUES(uploaded_by), uploaded_at=CURRENT_TIMESTAMP
                """,
                (document.employee_id, document.doc_type, document.file_path, document.original_name, uploaded_by),
            )
