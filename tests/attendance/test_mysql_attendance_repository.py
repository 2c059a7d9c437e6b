from __future__ import annotations

from datetime import date, time

import pytest
from mysql.connector.errors import IntegrityError

from hrms.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from hrms.core.enums import AttendanceStatus
from hrms.core.exceptions import ValidationError


def _mark(repo):
    return repo.create(
        employee_id="EMP0004",
        day=date(2026, 3, 16),
        login_time=time(9, 5),
        logout_time=None,
        status=AttendanceStatus.PRESENT,
        recipient="hr",
    )


def test_create_inserts_pending_row(scripted_db):
    conn = scripted_db()

    assert _mark(MySQLAttendanceRepository(conn)) == 99
    [(_, params)] = conn.statements("INSERT INTO attendance")
    assert params[4:] == ("Present", "Pending", "hr")
    assert conn.committed


def test_concurrent_duplicate_mark_is_a_validation_error(scripted_db):
    clash = IntegrityError(msg="Duplicate entry for key 'uq_attendance_employee_date'", errno=1062)
    conn = scripted_db([("INSERT INTO attendance", clash)])

    with pytest.raises(ValidationError, match="Attendance already marked for this date"):
        _mark(MySQLAttendanceRepository(conn))
    assert conn.rolled_back
