from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import Holiday
from .repository import HolidayRepository


def _row_to_holiday(r: dict) -> Holiday:
    return Holiday(
        id=int(r["id"]),
        holiday_date=to_date(r["holiday_date"]),
        description=r["description"],
        type=r.get("type") or "Public",
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, holiday_date, description, type
                FROM holidays
                WHERE YEAR(holiday_date)=%s
                ORDER BY holiday_date
                """,
                (year,),
            )
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def dates_between(self, start: date, end: date) -> Set[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date FROM holidays WHERE holiday_date BETWEEN %s AND %s",
                (start, end),
            )
            return {to_date(r["holiday_date"]) for r in fetchall(cur)}

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, holiday_date, description, type FROM holidays WHERE id=%s", (holiday_id,))
            row = fetchone(cur)
            return _row_to_holiday(row) if row else None

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, holiday_date, description, type FROM holidays WHERE holiday_date=%s",
                (holiday_date,),
            )
            row = fetchone(cur)
            return _row_to_holiday(row) if row else None

    def create(self, *, holiday_date: date, description: str, type: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays (holiday_date, description, type) VALUES (%s, %s, %s)",
                (holiday_date, description, type),
            )
            return int(cur.lastrowid)

    def update(self, *, holiday_id: int, holiday_date: date, description: str, type: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE holidays SET holiday_date=%s, description=%s, type=%s WHERE id=%s",
                (holiday_date, description, type, holiday_id),
            )
            return cur.rowcount > 0

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE id=%s", (holiday_id,))
            return cur.rowcount > 0
