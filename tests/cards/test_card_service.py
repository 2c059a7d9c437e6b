from __future__ import annotations

import pytest

from hrms.auth.model import CurrentUser
from hrms.cards.renderer import PALETTES, CardContent, render_card
from hrms.cards.service import CardService
from hrms.core.constants import CARD_STYLES
from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.employees.model import Employee, PersonalDetails
from hrms.organization.model import Company

HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")


class FakeEmployees:
    def get_by_employee_id(self, employee_id):
        if employee_id == "EMP0004":
            return Employee(id=4, employee_id="EMP0004", name="asha", mobile="9000000004", role=Role.EMPLOYEE, designation="Engineer")
        return None


class FakeDetails:
    def get_personal(self, employee_id):
        return PersonalDetails(
            employee_id=employee_id,
            full_name="Asha Rao",
            phone="9000000004",
            email="asha@example.com",
            gender="female",
            present_address="Hyderabad",
            position_type="fresher",
        )


class FakeCompany:
    def get_company(self):
        return Company(name="MNTechs Solutions", website="https://mntechs.example")


@pytest.fixture()
def service():
    return CardService(FakeEmployees(), FakeDetails(), FakeCompany())


def test_every_style_has_a_palette():
    assert set(PALETTES) == set(CARD_STYLES)


@pytest.mark.parametrize("style", CARD_STYLES)
def test_render_card_has_front_and_back(style):
    content = CardContent("ACME", "Asha Rao", "Engineer", "900", "a@example.com", "Hyderabad", "-")
    pdf = render_card(content, style)
    assert pdf.startswith(b"%PDF")
    assert b"/Count 2" in pdf


def test_owner_downloads_own_card(service):
    filename, pdf = service.card_pdf(actor=EMPLOYEE, employee_id="EMP0004", style="Modern")
    assert filename == "EMP0004_modern_card.pdf"
    assert pdf.startswith(b"%PDF")


def test_card_access_rules(service):
    with pytest.raises(AuthorizationError):
        service.card_pdf(actor=EMPLOYEE, employee_id="EMP0002", style="classic")
    with pytest.raises(NotFoundError):
        service.card_pdf(actor=HR, employee_id="EMP9999", style="classic")
    with pytest.raises(ValidationError, match="style"):
        service.card_pdf(actor=HR, employee_id="EMP0004", style="neon")
