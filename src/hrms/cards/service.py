from __future__ import annotations

from typing import Tuple

from ..auth.model import CurrentUser
from ..common.validators import require_choice
from ..core.constants import CARD_STYLES
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.repository import EmployeeDetailsRepository, EmployeeRepository
from ..organization.service import CompanyService
from .renderer import CardContent, render_card


class CardService:
    def __init__(self, employees: EmployeeRepository, details: EmployeeDetailsRepository, company: CompanyService):
        self._employees = employees
        self._details = details
        self._company = company

    def card_pdf(self, *, actor: CurrentUser, employee_id: str, style: str) -> Tuple[str, bytes]:
        style = require_choice((style or "").lower(), CARD_STYLES, "style")
        if employee_id != actor.employee_id and not actor.is_approver:
            raise AuthorizationError("You can only download your own visiting card")
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        personal = self._details.get_personal(employee.employee_id)
        company = self._company.get_company()
        content = CardContent(
            company_name=company.name,
            name=(personal.full_name if personal else None) or employee.name,
            designation=employee.designation or (personal.position_title if personal else None) or "Employee",
            phone=employee.mobile or "-",
            email=employee.email or (personal.email if personal else None) or "-",
            address=(personal.present_address if personal else None) or company.address or "-",
            website=company.website or "-",
        )
        return f"{employee.employee_id}_{style}_card.pdf", render_card(content, style)
