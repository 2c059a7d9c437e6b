from __future__ import annotations

import io
from dataclasses import replace
from decimal import Decimal

import pytest
from werkzeug.datastructures import FileStorage

from hrms.auth.model import CurrentUser
from hrms.common.uploads import UploadStore
from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hrms.employees.details_service import EmployeeDetailsService
from hrms.employees.model import Employee

HR = CurrentUser(id=2, employee_id="EMP0002", role=Role.HR, mobile="9000000002")
EMPLOYEE = CurrentUser(id=4, employee_id="EMP0004", role=Role.EMPLOYEE, mobile="9000000004")
OTHER = CurrentUser(id=5, employee_id="EMP0005", role=Role.EMPLOYEE, mobile="9000000005")

PERSONAL = {
    "full_name": "Asha Rao",
    "father_name": "Mohan Rao",
    "mother_name": "Lata Rao",
    "phone": "9000000004",
    "email": "asha@example.com",
    "gender": "female",
    "present_address": "Hyderabad",
    "position_type": "fresher",
}


class FakeEmployees:
    def __init__(self):
        self.rows = {
            e.employee_id: Employee(id=e.id, employee_id=e.employee_id, name=e.employee_id, mobile=e.mobile, role=e.role)
            for e in (HR, EMPLOYEE, OTHER)
        }

    def get_by_employee_id(self, employee_id):
        return self.rows.get(employee_id)

    def set_photo(self, *, employee_id, photo_path):
        self.rows[employee_id] = replace(self.rows[employee_id], photo_path=photo_path)
        return True


class FakeDetails:
    def __init__(self):
        self.personal = {}
        self.bank = {}
        self.education = {}
        self.documents = {}

    def get_personal(self, employee_id):
        return self.personal.get(employee_id)

    def create_personal(self, details, *, created_by):
        self.personal[details.employee_id] = details

    def update_personal(self, employee_id, fields):
        self.personal[employee_id] = replace(self.personal[employee_id], **fields)
        return True

    def get_bank(self, employee_id):
        return self.bank.get(employee_id)

    def create_bank(self, details, *, created_by):
        self.bank[details.employee_id] = details

    def update_bank(self, employee_id, fields):
        self.bank[employee_id] = replace(self.bank[employee_id], **fields)
        return True

    def get_education(self, employee_id):
        return self.education.get(employee_id)

    def create_education(self, details, *, created_by):
        self.education[details.employee_id] = details

    def update_education(self, employee_id, fields):
        self.education[employee_id] = replace(self.education[employee_id], **fields)
        return True

    def list_documents(self, employee_id):
        return [d for (emp, _), d in self.documents.items() if emp == employee_id]

    def upsert_document(self, document, *, uploaded_by):
        self.documents[(document.employee_id, document.doc_type)] = document


@pytest.fixture()
def details():
    return FakeDetails()


@pytest.fixture()
def service(details, tmp_path):
    return EmployeeDetailsService(FakeEmployees(), details, UploadStore(tmp_path, max_bytes=1024))


def test_personal_details_are_created_once(service):
    created = service.create_personal(actor=EMPLOYEE, data=PERSONAL)
    assert created.employee_id == "EMP0004"
    with pytest.raises(ValidationError, match="already exist"):
        service.create_personal(actor=EMPLOYEE, data=PERSONAL)


def test_experienced_candidates_need_employment_fields(service):
    with pytest.raises(ValidationError, match="experienced"):
        service.create_personal(actor=EMPLOYEE, data=dict(PERSONAL, position_type="experienced"))

    created = service.create_personal(
        actor=EMPLOYEE,
        data=dict(
            PERSONAL,
            position_type="experienced",
            employer_id_name="ACME-77",
            position_title="Analyst",
            employment_type="full-time",
            joining_date="2023-06-01",
        ),
    )
    assert created.employment_type == "full-time"


def test_update_personal_merges_existing_values(service):
    service.create_personal(actor=EMPLOYEE, data=PERSONAL)
    updated = service.update_personal(actor=EMPLOYEE, data={"present_address": "Chennai"})
    assert updated.present_address == "Chennai"
    assert updated.full_name == "Asha Rao"
    assert service.get_personal(actor=HR, employee_id="EMP0004").present_address == "Chennai"


def test_employees_cannot_touch_others(service):
    with pytest.raises(AuthorizationError):
        service.create_personal(actor=EMPLOYEE, data=dict(PERSONAL, employee_id="EMP0005"))
    with pytest.raises(AuthorizationError):
        service.get_bank(actor=OTHER, employee_id="EMP0004")
    with pytest.raises(NotFoundError):
        service.get_bank(actor=HR, employee_id="EMP9999")


def test_bank_details_validation(service):
    with pytest.raises(ValidationError, match="digits"):
        service.create_bank(actor=EMPLOYEE, data={"bank_account_number": "12AB", "ifsc_number": "SBIN0000001"})
    with pytest.raises(ValidationError, match="11 characters"):
        service.create_bank(actor=EMPLOYEE, data={"bank_account_number": "1234", "ifsc_number": "SBIN"})
    bank = service.create_bank(actor=EMPLOYEE, data={"bank_account_number": "1234567890", "ifsc_number": "sbin0000001"})
    assert bank.ifsc_number == "SBIN0000001"
    assert service.update_bank(actor=EMPLOYEE, data={"ifsc_number": "HDFC0000002"}).bank_account_number == "1234567890"


def test_education_marks_are_percentages(service):
    with pytest.raises(ValidationError, match="graduation_marks"):
        service.create_education(actor=EMPLOYEE, data={"graduation_name": "B.Tech", "graduation_marks": 140})
    created = service.create_education(actor=EMPLOYEE, data={"tenth_class_name": "CBSE", "tenth_class_marks": "91.5"})
    assert created.tenth_class_marks == Decimal("91.5")
    assert created.graduation_marks is None


def test_progress_counts_completed_sections(service):
    assert service.progress(actor=EMPLOYEE)["progress"] == 0
    service.create_personal(actor=EMPLOYEE, data=PERSONAL)
    service.create_bank(actor=EMPLOYEE, data={"bank_account_number": "1234567890", "ifsc_number": "SBIN0000001"})
    service.upload_document(actor=EMPLOYEE, doc_type="pan", file=FileStorage(stream=io.BytesIO(b"pan"), filename="pan.pdf"))
    service.upload_photo(actor=EMPLOYEE, file=FileStorage(stream=io.BytesIO(b"img"), filename="me.png"))

    progress = service.progress(actor=EMPLOYEE)
    assert progress["progress"] == 80
    assert progress["sections"]["education"] is False


def test_upload_rules(service):
    with pytest.raises(ValidationError, match="doc_type"):
        service.upload_document(actor=EMPLOYEE, doc_type="passport", file=FileStorage(stream=io.BytesIO(b"x"), filename="p.pdf"))
    with pytest.raises(ValidationError, match="Invalid file type"):
        service.upload_document(actor=EMPLOYEE, doc_type="offer_letter", file=FileStorage(stream=io.BytesIO(b"x"), filename="offer.docx"))
    with pytest.raises(ValidationError, match="too large"):
        service.upload_photo(actor=EMPLOYEE, file=FileStorage(stream=io.BytesIO(b"x" * 2048), filename="me.jpg"))
