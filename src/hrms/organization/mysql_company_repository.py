from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Company
from .repository import CompanyRepository


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT name, address, pan, gstin, website, email, phone FROM company ORDER BY id LIMIT 1"
            )
            row = fetchone(cur)
            if not row:
                return None
            return Company(
                name=row["name"],
                address=row.get("address"),
                pan=row.get("pan"),
                gstin=row.get("gstin"),
                website=row.get("website"),
                email=row.get("email"),
                phone=row.get("phone"),
            )
