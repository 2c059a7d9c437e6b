from __future__ import annotations

from datetime import date
from decimal import Decimal

from hrms.auth.model import CurrentUser
from hrms.core.enums import LeaveType, Role
from hrms.dashboard.service import DashboardService
from hrms.leaves.model import LeaveBalance

ADMIN = CurrentUser(id=1, employee_id="EMP0001", role=Role.SUPER_ADMIN, mobile="9000000001")
HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")


class FakeEmployees:
    def count_active(self):
        return 12


class FakeLeaves:
    def __init__(self, calls):
        self.calls = calls

    def count_pending(self, *, recipient=None):
        self.calls.append(("leaves", recipient))
        return 3

    def list_balances(self, *, year, employee_id=None):
        return [LeaveBalance(employee_id, LeaveType.CASUAL, year, Decimal("3"), Decimal("1"))]


class FakeAttendance:
    def __init__(self, calls):
        self.calls = calls

    def count_pending(self, *, recipient=None):
        self.calls.append(("attendance", recipient))
        return 5

    def status_tally(self, employee_id, start, end):
        self.calls.append(("tally", start, end))
        return {"Present": 9, "Leave": 1}


class FakeExpenses:
    def __init__(self, calls):
        self.calls = calls

    def count_pending(self, *, submitted_to=None):
        self.calls.append(("expenses", submitted_to))
        return 2


def _service():
    calls = []
    service = DashboardService(
        FakeEmployees(),
        FakeLeaves(calls),
        FakeAttendance(calls),
        FakeExpenses(calls),
        today=lambda: date(2026, 3, 16),
    )
    return service, calls


def test_hr_sees_own_queue():
    service, calls = _service()
    summary = service.summary(actor=HR)
    assert summary == {
        "role": "hr",
        "active_employees": 12,
        "pending_leaves": 3,
        "pending_attendance": 5,
        "pending_travel_expenses": 2,
    }
    assert calls == [("leaves", "hr"), ("attendance", "hr"), ("expenses", "hr")]


def test_super_admin_counts_everything():
    service, calls = _service()
    service.summary(actor=ADMIN)
    assert all(recipient is None for _, recipient in calls)


def test_employee_sees_month_tally_and_balances():
    service, calls = _service()
    summary = service.summary(actor=EMPLOYEE)
    assert summary["month"] == "2026-03"
    assert summary["attendance"] == {"Present": 9, "Absent": 0, "Half Day": 0, "Leave": 1}
    assert summary["leave_balances"][0]["remaining"] == 2.0
    assert calls == [("tally", date(2026, 3, 1), date(2026, 3, 31))]
