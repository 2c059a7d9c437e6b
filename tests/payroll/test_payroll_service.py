from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hrms.auth.model import CurrentUser
from hrms.core.enums import LeaveType, PayrollStatus, RequestStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.employees.model import BankDetails, Employee
from hrms.leaves.model import Leave
from hrms.payroll.service import PayrollService

ADMIN = CurrentUser(id=1, employee_id="EMP0001", role=Role.SUPER_ADMIN, mobile="9000000001")
HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")


def _employee(employee_id, basic="0", allowances="0"):
    return Employee(
        id=int(employee_id[-4:]),
        employee_id=employee_id,
        name=f"Name {employee_id}",
        mobile="900000" + employee_id[-4:],
        role=Role.EMPLOYEE,
        basic_salary=Decimal(basic),
        allowances=Decimal(allowances),
    )


class FakePayroll:
    def __init__(self):
        self.rows = {}

    def get(self, *, employee_id, month):
        return self.rows.get((employee_id, month))

    def insert(self, record):
        key = (record.employee_id, record.month)
        if key in self.rows:
            return False
        self.rows[key] = record
        return True

    def list_records(self, *, month=None, employee_id=None, page=1, limit=10):
        rows = [r for r in self.rows.values() if (not month or r.month == month) and (not employee_id or r.employee_id == employee_id)]
        return rows[(page - 1) * limit : page * limit], len(rows)

    def list_for_month(self, month):
        return [r for r in self.rows.values() if r.month == month]


class FakeEmployees:
    def __init__(self, *employees):
        self.by_id = {e.employee_id: e for e in employees}

    def get_by_employee_id(self, employee_id):
        return self.by_id.get(employee_id)

    def list_active(self):
        return list(self.by_id.values())


class FakeDetails:
    def __init__(self, banked=()):
        self.banked = set(banked)

    def get_bank(self, employee_id):
        if employee_id in self.banked:
            return BankDetails(employee_id=employee_id, bank_account_number="123456789", ifsc_number="SBIN0000001")
        return None


class FakeLeaves:
    def __init__(self, leaves=()):
        self.leaves = list(leaves)

    def list_leaves(self, *, employee_id=None, recipient=None, status=None, start=None, end=None, limit=200):
        return [
            l
            for l in self.leaves
            if l.employee_id == employee_id and l.status is status and l.start_date <= end and l.end_date >= start
        ]


class FakeAttendance:
    def status_tally(self, employee_id, start, end):
        return {"Present": 15}


class FakeHolidays:
    def __init__(self, days=()):
        self.days = set(days)

    def dates_between(self, start, end):
        return {d for d in self.days if start <= d <= end}


def _leave(leave_type, start, end, total, *, half=False):
    return Leave(
        id=1,
        employee_id="EMP0004",
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        total_days=Decimal(total),
        reason="x",
        status=RequestStatus.APPROVED,
        leave_status="Paid" if leave_type.is_paid else "Unpaid",
        recipient="hr",
        is_half_day=half,
    )


def _service(employees=None, leaves=(), holidays=(), banked=()):
    payroll = FakePayroll()
    service = PayrollService(
        payroll,
        employees or FakeEmployees(_employee("EMP0004", "10000", "5000")),
        FakeDetails(banked),
        FakeLeaves(leaves),
        FakeAttendance(),
        FakeHolidays(holidays),
        today=lambda: date(2026, 3, 15),
    )
    return service, payroll


def test_month_summary_splits_paid_and_unpaid_days():
    leaves = [
        # spills over from February; only 2026-03-02 counts
        _leave(LeaveType.CASUAL, date(2026, 2, 27), date(2026, 3, 2), "2"),
        _leave(LeaveType.UNPAID, date(2026, 3, 10), date(2026, 3, 11), "2"),
        _leave(LeaveType.SICK, date(2026, 3, 17), date(2026, 3, 17), "0.5", half=True),
    ]
    service, _ = _service(leaves=leaves, holidays=[date(2026, 3, 4), date(2026, 3, 8)])

    summary = service.month_summary(employee_id="EMP0004", month="2026-03")

    # March 2026 has 22 weekdays; one holiday falls on a weekday, one on a Sunday
    assert summary.total_working_days == 21
    assert summary.holidays == 1
    assert summary.paid_leave_days == Decimal("1.5")
    assert summary.unpaid_leave_days == Decimal("2")
    assert summary.present_days == 15


def test_generate_for_month_skips_existing_and_unsalaried():
    employees = FakeEmployees(_employee("EMP0004", "10000", "5000"), _employee("EMP0005"), _employee("EMP0006", "20000"))
    service, payroll = _service(employees=employees, banked=["EMP0006"])

    first = service.generate_for_month(actor=HR, month="2026-03")
    second = service.generate_for_month(actor=HR, month="2026-03")

    assert first.created == ("EMP0004", "EMP0006")
    assert first.skipped_no_salary == ("EMP0005",)
    assert second.created == ()
    assert second.skipped_existing == ("EMP0004", "EMP0006")
    assert payroll.get(employee_id="EMP0004", month="2026-03").payment_method == "Cash"
    assert payroll.get(employee_id="EMP0006", month="2026-03").payment_method == "Bank Transfer"
    assert payroll.get(employee_id="EMP0004", month="2026-03").status is PayrollStatus.PENDING


def test_scheduled_generation_has_no_creator():
    service, payroll = _service()
    service.generate_for_month(actor=None, month="2026-03")
    record = payroll.get(employee_id="EMP0004", month="2026-03")
    assert record.created_by is None
    assert record.status is PayrollStatus.PENDING


def test_super_admin_generation_is_marked_paid():
    service, _ = _service()
    record = service.generate_for_employee(actor=ADMIN, employee_id="EMP0004", month="2026-03")
    assert record.status is PayrollStatus.PAID
    with pytest.raises(ValidationError, match="already exists"):
        service.generate_for_employee(actor=ADMIN, employee_id="EMP0004", month="2026-03")


def test_on_demand_generation_only_covers_closed_months():
    service, payroll = _service()
    employee = _employee("EMP0004", "10000", "5000")

    with pytest.raises(ValidationError, match="future month"):
        service.ensure_payroll(employee=employee, month="2027-12", actor=EMPLOYEE)
    with pytest.raises(ValidationError, match="until the month has ended"):
        service.ensure_payroll(employee=employee, month="2026-03", actor=EMPLOYEE)
    assert payroll.get(employee_id="EMP0004", month="2027-12") is None
    assert payroll.get(employee_id="EMP0004", month="2026-03") is None

    assert service.ensure_payroll(employee=employee, month="2026-02", actor=EMPLOYEE).month == "2026-02"


def test_open_month_row_generated_by_hr_is_served_on_demand():
    service, _ = _service()
    service.generate_for_month(actor=HR, month="2026-03")
    employee = _employee("EMP0004", "10000", "5000")
    assert service.ensure_payroll(employee=employee, month="2026-03", actor=EMPLOYEE).month == "2026-03"


def test_explicit_generation_rejects_future_months():
    service, payroll = _service()
    with pytest.raises(ValidationError, match="future month"):
        service.generate_for_month(actor=HR, month="2026-04")
    with pytest.raises(ValidationError, match="future month"):
        service.generate_for_employee(actor=HR, employee_id="EMP0004", month="2026-04")
    assert payroll.get(employee_id="EMP0004", month="2026-04") is None


def test_generation_requires_approver_and_salary():
    service, _ = _service(employees=FakeEmployees(_employee("EMP0004")))
    with pytest.raises(AuthorizationError):
        service.generate_for_month(actor=EMPLOYEE, month="2026-03")
    with pytest.raises(ValidationError, match="no salary"):
        service.generate_for_employee(actor=HR, employee_id="EMP0004", month="2026-03")
    with pytest.raises(NotFoundError):
        service.generate_for_employee(actor=HR, employee_id="EMP9999", month="2026-03")
    with pytest.raises(ValidationError):
        service.generate_for_employee(actor=HR, employee_id="EMP0004", month="March")


def test_manual_payroll_checks_net_against_deductions():
    service, _ = _service()
    payload = {
        "employee_id": "EMP0004",
        "month": "2026-03",
        "basic_salary": "10000",
        "hra": "2000",
        "da": "2500",
        "other_allowances": "500",
        "pf_deduction": "1200",
        "esic_deduction": "112.50",
        "net_salary": "13000",
    }
    with pytest.raises(ValidationError, match="net_salary"):
        service.create_manual(actor=HR, payload=payload)

    payload["net_salary"] = "13687.50"
    record = service.create_manual(actor=HR, payload=payload)
    assert record.breakdown.gross_salary == Decimal("15000.00")
    assert record.created_by == "EMP0002"


def test_manual_payroll_rejects_mismatched_gross():
    service, _ = _service()
    with pytest.raises(ValidationError, match="gross_salary"):
        service.create_manual(
            actor=HR,
            payload={"employee_id": "EMP0004", "month": "2026-03", "basic_salary": "1000", "gross_salary": "2000", "net_salary": "1000"},
        )


def test_employees_only_list_their_own_rows():
    employees = FakeEmployees(_employee("EMP0004", "10000"), _employee("EMP0006", "20000"))
    service, _ = _service(employees=employees)
    service.generate_for_month(actor=HR, month="2026-03")

    rows, total, page, limit = service.list_payroll(actor=EMPLOYEE)
    assert [r.employee_id for r in rows] == ["EMP0004"]
    assert (total, page, limit) == (1, 1, 10)

    rows, total, _, _ = service.list_payroll(actor=HR, month="2026-03")
    assert total == 2


def test_report_pdf_renders_for_approvers():
    from hrms.organization.model import Company

    service, _ = _service()
    service.generate_for_month(actor=HR, month="2026-03")
    pdf = service.report_pdf(actor=HR, company=Company(name="MNTechs"), month="2026-03")
    assert pdf.startswith(b"%PDF")
    with pytest.raises(NotFoundError):
        service.report_pdf(actor=HR, company=Company(name="MNTechs"), month="2026-01")
