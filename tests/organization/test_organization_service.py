from __future__ import annotations

from datetime import date

import pytest

from hrms.auth.model import CurrentUser
from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.organization.model import Company, Department, Holiday
from hrms.organization.service import CompanyService, DepartmentService, HolidayService

HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")


class FakeDepartments:
    def __init__(self):
        self.rows = {1: Department(1, "Engineering")}

    def list_all(self):
        return list(self.rows.values())

    def get_by_name(self, name):
        return next((d for d in self.rows.values() if d.name.lower() == name.lower()), None)

    def create(self, *, name):
        dept_id = max(self.rows) + 1
        self.rows[dept_id] = Department(dept_id, name)
        return dept_id


class FakeHolidays:
    def __init__(self):
        self.rows = {}

    def list_for_year(self, year):
        return [h for h in self.rows.values() if h.holiday_date.year == year]

    def get_by_id(self, holiday_id):
        return self.rows.get(holiday_id)

    def get_by_date(self, holiday_date):
        return next((h for h in self.rows.values() if h.holiday_date == holiday_date), None)

    def create(self, *, holiday_date, description, type):
        holiday_id = len(self.rows) + 1
        self.rows[holiday_id] = Holiday(holiday_id, holiday_date, description, type)
        return holiday_id

    def update(self, *, holiday_id, holiday_date, description, type):
        self.rows[holiday_id] = Holiday(holiday_id, holiday_date, description, type)
        return True

    def delete(self, holiday_id):
        return self.rows.pop(holiday_id, None) is not None


class FakeCompany:
    def __init__(self, company=None):
        self.company = company

    def get(self):
        return self.company


def test_create_department():
    service = DepartmentService(FakeDepartments())
    created = service.create_department(actor=HR, name="  Finance ")
    assert created.name == "Finance"
    assert created.to_dict() == {"department_id": 2, "department_name": "Finance"}
    with pytest.raises(ValidationError, match="already exists"):
        service.create_department(actor=HR, name="engineering")
    with pytest.raises(AuthorizationError):
        service.create_department(actor=EMPLOYEE, name="Sales")


def test_holiday_lifecycle():
    repo = FakeHolidays()
    service = HolidayService(repo)
    holiday = service.create_holiday(actor=HR, holiday_date="2026-08-15", description="Independence Day")
    assert holiday.type == "Public"
    with pytest.raises(ValidationError, match="already exists"):
        service.create_holiday(actor=HR, holiday_date="2026-08-15", description="Duplicate")

    other = service.create_holiday(actor=HR, holiday_date="2026-10-02", description="Gandhi Jayanti", type="Gazetted")
    with pytest.raises(ValidationError, match="already exists"):
        service.update_holiday(actor=HR, holiday_id=other.id, holiday_date="2026-08-15")

    moved = service.update_holiday(actor=HR, holiday_id=other.id, description="Gandhi Jayanti (observed)")
    assert moved.holiday_date == date(2026, 10, 2)
    assert moved.type == "Gazetted"
    assert [h.description for h in service.list_holidays(year="2026")] == ["Independence Day", "Gandhi Jayanti (observed)"]

    service.delete_holiday(actor=HR, holiday_id=holiday.id)
    with pytest.raises(NotFoundError):
        service.delete_holiday(actor=HR, holiday_id=holiday.id)
    with pytest.raises(AuthorizationError):
        service.delete_holiday(actor=EMPLOYEE, holiday_id=other.id)


def test_holiday_date_format():
    service = HolidayService(FakeHolidays())
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        service.create_holiday(actor=HR, holiday_date="15/08/2026", description="x")


def test_company_falls_back_to_configured_identity():
    fallback = {"name": "MNTechs Solutions", "pan": "ABCDE1234F"}
    assert CompanyService(FakeCompany(), fallback=fallback).get_company() == Company(name="MNTechs Solutions", pan="ABCDE1234F")

    stored = Company(name="Stored Co", address="Pune")
    assert CompanyService(FakeCompany(stored), fallback=fallback).get_company() is stored
