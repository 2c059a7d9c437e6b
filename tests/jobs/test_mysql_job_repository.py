from __future__ import annotations

import pytest

from hrms.core.constants import JOB_MONTHLY_LEAVE_ALLOCATION, MONTHLY_LEAVE_ALLOCATION
from hrms.core.enums import JobStatus
from hrms.jobs.mysql_job_repository import MySQLJobRepository


def _allocate(repo):
    return repo.allocate_monthly(
        job_name=JOB_MONTHLY_LEAVE_ALLOCATION,
        period_key="2026-04",
        year=2026,
        allocation=MONTHLY_LEAVE_ALLOCATION,
    )


def test_allocation_claims_ledger_credits_and_completes(scripted_db):
    conn = scripted_db(
        [
            ("SELECT status FROM job_runs", [{"status": JobStatus.FAILED.value}]),
            ("SELECT COUNT(*) AS n FROM hrms_users", [{"n": 4}]),
        ]
    )

    credited = _allocate(MySQLJobRepository(conn))

    assert credited == 4
    assert conn.committed
    sql = [statement for statement, _ in conn.executed]
    assert sql[0].startswith("INSERT IGNORE INTO job_runs")
    assert sql[1].endswith("FOR UPDATE")
    credits = conn.statements("INSERT INTO leave_balances")
    assert {params[0]: params[2] for _, params in credits} == {
        t.value: days for t, days in MONTHLY_LEAVE_ALLOCATION.items()
    }
    assert all("ON DUPLICATE KEY UPDATE allocated = allocated + %s" in s for s, _ in credits)
    completed = conn.statements("UPDATE job_runs SET status=%s")
    assert completed[0][1][0] == JobStatus.COMPLETED.value
    assert completed[0][1][1] == "credited 4 employee(s)"
    # completion is the last write of the transaction
    assert sql[-1].startswith("UPDATE job_runs")


def test_completed_period_is_a_no_op(scripted_db):
    conn = scripted_db([("SELECT status FROM job_runs", [{"status": JobStatus.COMPLETED.value}])])

    assert _allocate(MySQLJobRepository(conn)) is None
    assert not conn.statements("INSERT INTO leave_balances")
    assert not conn.statements("UPDATE job_runs")
    assert not conn.statements("SELECT COUNT(*)")


def test_failure_mid_allocation_rolls_back_the_claim(scripted_db):
    conn = scripted_db(
        [
            ("SELECT status FROM job_runs", [{"status": JobStatus.FAILED.value}]),
            ("SELECT COUNT(*) AS n FROM hrms_users", [{"n": 2}]),
            ("INSERT INTO leave_balances", RuntimeError("lock wait timeout")),
        ]
    )

    with pytest.raises(RuntimeError, match="lock wait"):
        _allocate(MySQLJobRepository(conn))

    assert conn.rolled_back and not conn.committed
    assert not conn.statements("UPDATE job_runs")


def test_has_run_only_counts_completed_rows(scripted_db):
    conn = scripted_db([("SELECT 1 AS x FROM job_runs", [{"x": 1}])])

    assert MySQLJobRepository(conn).has_run(job_name=JOB_MONTHLY_LEAVE_ALLOCATION, period_key="2026-04")
    assert conn.executed[0][1] == (JOB_MONTHLY_LEAVE_ALLOCATION, "2026-04", JobStatus.COMPLETED.value)
