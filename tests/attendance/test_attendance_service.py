from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

import pytest

from hrms.attendance.model import AttendanceRecord
from hrms.attendance.service import AttendanceService
from hrms.auth.model import CurrentUser
from hrms.core.enums import AttendanceStatus, RequestStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError

NOW = datetime(2026, 3, 16, 9, 30, 15)

ADMIN = CurrentUser(id=1, employee_id="EMP0001", role=Role.SUPER_ADMIN, mobile="9000000001")
HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")


class FakeAttendance:
    def __init__(self):
        self.rows = {}
        self.next_id = 1

    def get_by_id(self, record_id):
        return self.rows.get(record_id)

    def get_for_employee_and_date(self, employee_id, day):
        for row in self.rows.values():
            if row.employee_id == employee_id and row.date == day:
                return row
        return None

    def create(self, *, employee_id, day, login_time, logout_time, status, recipient):
        record_id = self.next_id
        self.next_id += 1
        self.rows[record_id] = AttendanceRecord(
            id=record_id,
            employee_id=employee_id,
            date=day,
            status=status,
            approval_status=RequestStatus.PENDING,
            recipient=recipient,
            login_time=login_time,
            logout_time=logout_time,
        )
        return record_id

    def set_logout(self, *, record_id, logout_time):
        row = self.rows[record_id]
        if row.logout_time is not None:
            return False
        self.rows[record_id] = replace(row, logout_time=logout_time)
        return True

    def list_for_employee(self, employee_id, start, end):
        return [r for r in self.rows.values() if r.employee_id == employee_id and start <= r.date <= end]

    def list_records(self, *, recipient=None, day=None, employee_id=None, approval_status=None, limit=500):
        self.last_filters = {"recipient": recipient, "day": day, "employee_id": employee_id, "approval_status": approval_status}
        return list(self.rows.values())

    def decide(self, *, record_id, status, approved_by):
        row = self.rows[record_id]
        if row.approval_status is not RequestStatus.PENDING:
            return False
        self.rows[record_id] = replace(row, approval_status=status, approved_by=approved_by)
        return True


@pytest.fixture()
def repo():
    return FakeAttendance()


@pytest.fixture()
def service(repo):
    return AttendanceService(repo, clock=lambda: NOW)


def test_first_mark_records_login_with_role_recipient(service):
    record = service.mark_attendance(actor=EMPLOYEE)
    assert record.date == date(2026, 3, 16)
    assert record.login_time == time(9, 30, 15)
    assert record.status is AttendanceStatus.PRESENT
    assert record.approval_status is RequestStatus.PENDING
    assert record.recipient == "hr"


def test_hr_attendance_goes_to_super_admin(service):
    assert service.mark_attendance(actor=HR).recipient == "super_admin"


def test_second_mark_closes_the_day(service):
    service.mark_attendance(actor=EMPLOYEE, login_time="09:00")
    closed = service.mark_attendance(actor=EMPLOYEE, logout_time="18:00")
    assert closed.logout_time == time(18, 0)

    with pytest.raises(ValidationError, match="already marked"):
        service.mark_attendance(actor=EMPLOYEE, logout_time="19:00")


def test_logout_must_follow_login(service):
    with pytest.raises(ValidationError, match="after login_time"):
        service.mark_attendance(actor=EMPLOYEE, login_time="10:00", logout_time="09:00")


def test_future_dates_are_rejected(service):
    with pytest.raises(ValidationError, match="future"):
        service.mark_attendance(actor=EMPLOYEE, day="2026-03-17", login_time="09:00")


def test_past_date_needs_login_time(service):
    with pytest.raises(ValidationError, match="login_time is required"):
        service.mark_attendance(actor=EMPLOYEE, day="2026-03-13")
    record = service.mark_attendance(actor=EMPLOYEE, day="2026-03-13", login_time="09:15", logout_time="17:45")
    assert record.date == date(2026, 3, 13)


def test_leave_status_cannot_be_marked_directly(service):
    with pytest.raises(ValidationError, match="leave approval"):
        service.mark_attendance(actor=EMPLOYEE, status="Leave")


def test_day_covered_by_leave_is_locked(service, repo):
    repo.rows[99] = AttendanceRecord(
        id=99,
        employee_id="EMP0004",
        date=date(2026, 3, 16),
        status=AttendanceStatus.LEAVE,
        approval_status=RequestStatus.APPROVED,
        recipient="hr",
        leave_id=7,
    )
    with pytest.raises(ValidationError, match="approved leave"):
        service.mark_attendance(actor=EMPLOYEE)


def test_list_my_attendance_defaults_to_current_month(service):
    service.mark_attendance(actor=EMPLOYEE, day="2026-02-27", login_time="09:00")
    service.mark_attendance(actor=EMPLOYEE, login_time="09:00")
    assert [r.date for r in service.list_my_attendance(actor=EMPLOYEE)] == [date(2026, 3, 16)]
    assert [r.date for r in service.list_my_attendance(actor=EMPLOYEE, month="2026-02")] == [date(2026, 2, 27)]


def test_list_attendance_is_scoped_by_recipient(service, repo):
    with pytest.raises(AuthorizationError):
        service.list_attendance(actor=EMPLOYEE)

    service.list_attendance(actor=HR, approval_status="Pending")
    assert repo.last_filters["recipient"] == "hr"
    assert repo.last_filters["approval_status"] is RequestStatus.PENDING

    service.list_attendance(actor=ADMIN, day="2026-03-16")
    assert repo.last_filters["recipient"] is None
    assert repo.last_filters["day"] == date(2026, 3, 16)


def test_decide_follows_recipient_rules(service):
    record = service.mark_attendance(actor=EMPLOYEE)

    with pytest.raises(ValidationError):
        service.decide_attendance(actor=HR, record_id=record.id, status="Pending")

    decided = service.decide_attendance(actor=HR, record_id=record.id, status="Approved")
    assert decided.approval_status is RequestStatus.APPROVED
    assert decided.approved_by == "EMP0002"

    with pytest.raises(ValidationError, match="already been processed"):
        service.decide_attendance(actor=ADMIN, record_id=record.id, status="Rejected")


def test_nobody_decides_their_own_record(service):
    record = service.mark_attendance(actor=HR)
    with pytest.raises(AuthorizationError):
        service.decide_attendance(actor=HR, record_id=record.id, status="Approved")
    assert service.decide_attendance(actor=ADMIN, record_id=record.id, status="Approved").approval_status is RequestStatus.APPROVED


def test_hr_cannot_decide_super_admin_queue(service):
    other_hr = CurrentUser(id=3, employee_id="EMP0003", role=Role.HR, mobile="9000000003")
    record = service.mark_attendance(actor=other_hr)
    with pytest.raises(AuthorizationError, match="not the approver"):
        service.decide_attendance(actor=HR, record_id=record.id, status="Approved")


def test_unknown_record(service):
    with pytest.raises(NotFoundError):
        service.decide_attendance(actor=HR, record_id=404, status="Approved")
