from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from ..auth.model import CurrentUser
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.repository import EmployeeRepository
from ..organization.service import CompanyService
from ..payroll.model import PayrollRecord
from ..payroll.service import PayrollService
from .renderer import render_payslip


class PayslipService:
    def __init__(self, payroll: PayrollService, employees: EmployeeRepository, company: CompanyService):
        self._payroll = payroll
        self._employees = employees
        self._company = company

    def payslip_pdf(self, *, actor: CurrentUser, employee_id: str, month: str) -> Tuple[str, bytes]:
        """Return (file name, PDF bytes); the payroll row is generated on demand."""
        if not actor.is_approver and actor.employee_id != employee_id:
            raise AuthorizationError("You can only download your own payslips")
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        record = self._payroll.ensure_payroll(employee=employee, month=month, actor=actor)
        pdf = render_payslip(company=self._company.get_company(), employee=employee, record=record)
        return f"payslip_{employee.employee_id}_{record.month}.pdf", pdf

    def list_payslips(
        self,
        *,
        actor: CurrentUser,
        month: Optional[str] = None,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Sequence[PayrollRecord], int, int, int]:
        return self._payroll.list_payroll(actor=actor, month=month, page=page, limit=limit)
