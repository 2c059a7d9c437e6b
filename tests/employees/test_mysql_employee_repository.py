from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from mysql.connector.errors import IntegrityError

from hrms.core.constants import JOB_MONTHLY_LEAVE_ALLOCATION, MONTHLY_LEAVE_ALLOCATION
from hrms.core.enums import JobStatus, Role
from hrms.core.exceptions import ValidationError
from hrms.employees.model import NewEmployee
from hrms.employees.mysql_employee_repository import MySQLEmployeeRepository

NEW = NewEmployee(
    employee_id="EMP0005",
    name="Ravi Kumar",
    mobile="9876543210",
    role=Role.EMPLOYEE,
    email=None,
    department_id=10,
    designation=None,
    basic_salary=Decimal("25000"),
    allowances=Decimal("0"),
    bonuses=Decimal("0"),
    joining_date=date(2026, 10, 1),
)


def _create(repo):
    return repo.create_employee(
        new=NEW,
        password_hash="hash",
        leave_allocation=MONTHLY_LEAVE_ALLOCATION,
        allocation_year=2026,
        allocation_period="2026-10",
    )


def _seeded(conn):
    return {params[1]: params[3] for _, params in conn.statements("INSERT INTO leave_balances")}


def test_new_employee_before_monthly_run_starts_at_zero(scripted_db):
    conn = scripted_db()

    assert _create(MySQLEmployeeRepository(conn)) == 99

    ledger_sql, ledger_params = conn.executed[0]
    assert ledger_sql.startswith("SELECT status FROM job_runs") and ledger_sql.endswith("FOR UPDATE")
    assert ledger_params == (JOB_MONTHLY_LEAVE_ALLOCATION, "2026-10")
    assert set(_seeded(conn).values()) == {Decimal("0")}
    assert conn.committed


def test_failed_monthly_run_leaves_crediting_to_the_retry(scripted_db):
    conn = scripted_db([("SELECT status FROM job_runs", [{"status": JobStatus.FAILED.value}])])

    _create(MySQLEmployeeRepository(conn))

    assert set(_seeded(conn).values()) == {Decimal("0")}


def test_new_employee_after_monthly_run_gets_this_month(scripted_db):
    conn = scripted_db([("SELECT status FROM job_runs", [{"status": JobStatus.COMPLETED.value}])])

    _create(MySQLEmployeeRepository(conn))

    assert _seeded(conn) == {t.value: days for t, days in MONTHLY_LEAVE_ALLOCATION.items()}


def test_unique_key_clash_is_a_validation_error(scripted_db):
    clash = IntegrityError(msg="Duplicate entry '9876543210-employee' for key 'uq_users_mobile_role'", errno=1062)
    conn = scripted_db([("INSERT INTO hrms_users", clash)])

    with pytest.raises(ValidationError, match="mobile and role already exists"):
        _create(MySQLEmployeeRepository(conn))
    assert conn.rolled_back
    assert not conn.statements("INSERT INTO leave_balances")


def test_employee_id_clash_is_a_validation_error(scripted_db):
    clash = IntegrityError(msg="Duplicate entry 'EMP0005' for key 'uq_users_employee_id'", errno=1062)
    conn = scripted_db([("INSERT INTO hrms_users", clash)])

    with pytest.raises(ValidationError, match="Employee ID already exists"):
        _create(MySQLEmployeeRepository(conn))
