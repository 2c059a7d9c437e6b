from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM departments ORDER BY name")
            return [Department(id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM departments WHERE id=%s", (department_id,))
            row = fetchone(cur)
            return Department(id=int(row["id"]), name=row["name"]) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM departments WHERE name=%s", (name,))
            row = fetchone(cur)
            return Department(id=int(row["id"]), name=row["name"]) if row else None

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments (name) VALUES (%s)", (name,))
            return int(cur.lastrowid)
