from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..common.logging import get_logger
from ..core.constants import MONTHLY_LEAVE_ALLOCATION

logger = get_logger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hrms_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    target = _as_target(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("seed applied from %s", seed_path)


DEMO_USERS = (
    # employee_id, name, mobile, email, role, department, password
    ("EMP0001", "Super Admin", "9000000001", "admin@example.com", "super_admin", "HR", "admin12345"),
    ("EMP0002", "Hannah HR", "9000000002", "hr@example.com", "hr", "HR", "hrpass12345"),
    ("EMP0003", "Dev Head", "9000000003", "head@example.com", "dept_head", "Engineering", "headpass123"),
    ("EMP0004", "Asha Employee", "9000000004", "asha@example.com", "employee", "Engineering", "staffpass123"),
)


def ensure_demo_users(db_config: dict, *, today: date | None = None) -> None:
    """Upsert demo accounts and give each one the current month's leave allocation."""
    target = _as_target(db_config)
    today = today or date.today()

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def department_id(name: str) -> int:
            cur.execute("SELECT id FROM departments WHERE name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for name={name}")
            return int(row["id"])

        for employee_id, name, mobile, email, role, dept, password in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO hrms_users
                    (employee_id, name, mobile, email, role, password, is_temporary_password,
                     department_id, designation, basic_salary, allowances, bonuses, joining_date)
                VALUES (%s, %s, %s, %s, %s, %s, 0, %s, %s, %s, %s, 0, %s)
                ON DUPLICATE KEY UPDATE name=VALUES(name), password=VALUES(password), status='active'
                """,
                (
                    employee_id, name, mobile, email, role, generate_password_hash(password),
                    department_id(dept), role.replace("_", " ").title(), 30000, 12000, today.replace(month=1, day=1),
                ),
            )
            for leave_type, days in MONTHLY_LEAVE_ALLOCATION.items():
                cur.execute(
                    """
                    INSERT IGNORE INTO leave_balances (employee_id, leave_type, year, allocated, used)
                    VALUES (%s, %s, %s, %s, 0)
                    """,
                    (employee_id, leave_type.value, today.year, days),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
