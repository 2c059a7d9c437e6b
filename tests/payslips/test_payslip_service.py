from __future__ import annotations

from decimal import Decimal

import pytest

from hrms.auth.model import CurrentUser
from hrms.core.enums import PayrollStatus, Role
from hrms.core.exceptions import AuthorizationError, NotFoundError
from hrms.employees.model import Employee
from hrms.organization.model import Company
from hrms.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hrms.payroll.model import MonthSummary, PayrollRecord, SalaryInput
from hrms.payslips.service import PayslipService

HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
OWNER = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")
OTHER = CurrentUser(id=5, employee_id="EMP0005", role=Role.MANAGER, mobile="9000000005")

EMPLOYEE = Employee(
    id=4,
    employee_id="EMP0004",
    name="Asha Rao",
    mobile="9000000004",
    role=Role.EMPLOYEE,
    basic_salary=Decimal("10000"),
    allowances=Decimal("5000"),
)


class FakePayrollService:
    def __init__(self):
        self.generated = []

    def ensure_payroll(self, *, employee, month, actor):
        self.generated.append((employee.employee_id, month))
        breakdown = StandardPayrollCalculator().calculate(
            SalaryInput(
                basic_salary=employee.basic_salary,
                allowances=employee.allowances,
                bonuses=employee.bonuses,
                working_days=22,
                unpaid_days=Decimal("0"),
            )
        )
        return PayrollRecord(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            month=month,
            breakdown=breakdown,
            summary=MonthSummary(Decimal("1"), Decimal("0"), 21, 0, 22),
            status=PayrollStatus.PENDING,
            payment_method="Cash",
        )

    def list_payroll(self, *, actor, month=None, page=1, limit=10):
        return [], 0, 1, 10


class FakeEmployees:
    def get_by_employee_id(self, employee_id):
        return EMPLOYEE if employee_id == EMPLOYEE.employee_id else None


class FakeCompany:
    def get_company(self):
        return Company(name="MNTechs Solutions", address="Bengaluru", pan="ABCDE1234F")


@pytest.fixture()
def service():
    return PayslipService(FakePayrollService(), FakeEmployees(), FakeCompany())


def test_owner_downloads_own_payslip(service):
    filename, pdf = service.payslip_pdf(actor=OWNER, employee_id="EMP0004", month="2026-03")
    assert filename == "payslip_EMP0004_2026-03.pdf"
    assert pdf.startswith(b"%PDF")


def test_hr_can_download_any_payslip(service):
    _, pdf = service.payslip_pdf(actor=HR, employee_id="EMP0004", month="2026-03")
    assert pdf.startswith(b"%PDF")


def test_other_employees_are_rejected(service):
    with pytest.raises(AuthorizationError):
        service.payslip_pdf(actor=OTHER, employee_id="EMP0004", month="2026-03")


def test_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.payslip_pdf(actor=HR, employee_id="EMP9999", month="2026-03")
