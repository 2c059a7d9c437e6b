from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

from werkzeug.datastructures import FileStorage

from ..auth.model import CurrentUser
from ..common.datetime_utils import require_iso_date
from ..common.logging import get_logger
from ..common.uploads import UploadStore
from ..common.validators import require_choice, require_non_empty, require_range
from ..core.constants import DOCUMENT_TYPES, PHOTO_EXTENSIONS
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import BankDetails, EducationDetails, EmployeeDocument, PersonalDetails
from .repository import EmployeeDetailsRepository, EmployeeRepository

logger = get_logger(__name__)

GENDERS = ("male", "female", "other")
POSITION_TYPES = ("fresher", "experienced")
EMPLOYMENT_TYPES = ("full-time", "part-time", "internship", "contract")
PROGRESS_SECTIONS = ("personal", "education", "bank", "documents", "photo")


def _optional_text(value: Any) -> Optional[str]:
    return (str(value).strip() or None) if value is not None else None


def _marks(value: Any, field: str) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    return Decimal(str(require_range(value, field, 0, 100)))


class EmployeeDetailsService:
    """Onboarding details; employees touch only their own, approvers anyone's."""

    def __init__(self, employees: EmployeeRepository, details: EmployeeDetailsRepository, uploads: UploadStore):
        self._employees = employees
        self._details = details
        self._uploads = uploads

    def _target(self, actor: CurrentUser, employee_id: Optional[str]) -> str:
        target = (employee_id or "").strip() or actor.employee_id
        if target != actor.employee_id and not actor.is_approver:
            raise AuthorizationError("You can only manage your own details")
        if not self._employees.get_by_employee_id(target):
            raise NotFoundError("Employee not found")
        return target

    # Personal
    def _personal_from(self, employee_id: str, data: Mapping[str, Any]) -> PersonalDetails:
        position_type = require_choice(data.get("position_type"), POSITION_TYPES, "position_type")
        employment_type = _optional_text(data.get("employment_type"))
        joining = data.get("joining_date")
        contract_end = data.get("contract_end_date")
        if position_type == "experienced":
            if not (data.get("employer_id_name") and data.get("position_title") and employment_type and joining):
                raise ValidationError("All experienced fields are required")
            require_choice(employment_type, EMPLOYMENT_TYPES, "employment_type")
        return PersonalDetails(
            employee_id=employee_id,
            full_name=require_non_empty(data.get("full_name"), "full_name"),
            father_name=require_non_empty(data.get("father_name"), "father_name"),
            mother_name=require_non_empty(data.get("mother_name"), "mother_name"),
            phone=require_non_empty(data.get("phone"), "phone"),
            email=require_non_empty(data.get("email"), "email"),
            gender=require_choice(data.get("gender"), GENDERS, "gender"),
            present_address=require_non_empty(data.get("present_address"), "present_address"),
            previous_address=_optional_text(data.get("previous_address")),
            position_type=position_type,
            employer_id_name=_optional_text(data.get("employer_id_name")),
            position_title=_optional_text(data.get("position_title")),
            employment_type=employment_type,
            joining_date=require_iso_date(joining, "joining_date") if joining else None,
            contract_end_date=require_iso_date(contract_end, "contract_end_date") if contract_end else None,
        )

    def create_personal(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> PersonalDetails:
        target = self._target(actor, data.get("employee_id"))
        if self._details.get_personal(target):
            raise ValidationError("Personal details already exist for this employee")
        details = self._personal_from(target, data)
        self._details.create_personal(details, created_by=actor.employee_id)
        return details

    def get_personal(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> PersonalDetails:
        details = self._details.get_personal(self._target(actor, employee_id))
        if not details:
            raise NotFoundError("Personal details not found")
        return details

    def update_personal(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> PersonalDetails:
        target = self._target(actor, data.get("employee_id"))
        current = self._details.get_personal(target)
        if not current:
            raise NotFoundError("Personal details not found")
        merged = {**current.to_dict(), **{k: v for k, v in data.items() if v is not None}}
        details = self._personal_from(target, merged)
        fields = details.to_dict()
        fields.pop("employee_id")
        fields["joining_date"] = details.joining_date
        fields["contract_end_date"] = details.contract_end_date
        self._details.update_personal(target, fields)
        return details

    # Bank
    def _bank_from(self, employee_id: str, data: Mapping[str, Any]) -> BankDetails:
        account = require_non_empty(data.get("bank_account_number"), "bank_account_number")
        ifsc = require_non_empty(data.get("ifsc_number"), "ifsc_number").upper()
        if not account.isdigit():
            raise ValidationError("bank_account_number must contain digits only")
        if len(ifsc) != 11:
            raise ValidationError("ifsc_number must be 11 characters")
        return BankDetails(employee_id=employee_id, bank_account_number=account, ifsc_number=ifsc)

    def create_bank(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> BankDetails:
        target = self._target(actor, data.get("employee_id"))
        if self._details.get_bank(target):
            raise ValidationError("Bank details already exist for this employee")
        details = self._bank_from(target, data)
        self._details.create_bank(details, created_by=actor.employee_id)
        return details

    def get_bank(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> BankDetails:
        details = self._details.get_bank(self._target(actor, employee_id))
        if not details:
            raise NotFoundError("Bank details not found")
        return details

    def update_bank(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> BankDetails:
        target = self._target(actor, data.get("employee_id"))
        current = self._details.get_bank(target)
        if not current:
            raise NotFoundError("Bank details not found")
        details = self._bank_from(target, {**current.to_dict(), **{k: v for k, v in data.items() if v}})
        self._details.update_bank(
            target,
            {"bank_account_number": details.bank_account_number, "ifsc_number": details.ifsc_number},
        )
        return details

    # Education
    def _education_from(self, employee_id: str, data: Mapping[str, Any]) -> EducationDetails:
        return EducationDetails(
            employee_id=employee_id,
            tenth_class_name=_optional_text(data.get("tenth_class_name")),
            tenth_class_marks=_marks(data.get("tenth_class_marks"), "tenth_class_marks"),
            intermediate_name=_optional_text(data.get("intermediate_name")),
            intermediate_marks=_marks(data.get("intermediate_marks"), "intermediate_marks"),
            graduation_name=_optional_text(data.get("graduation_name")),
            graduation_marks=_marks(data.get("graduation_marks"), "graduation_marks"),
            postgraduation_name=_optional_text(data.get("postgraduation_name")),
            postgraduation_marks=_marks(data.get("postgraduation_marks"), "postgraduation_marks"),
        )

    def create_education(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> EducationDetails:
        target = self._target(actor, data.get("employee_id"))
        if self._details.get_education(target):
            raise ValidationError("Education details already exist for this employee")
        details = self._education_from(target, data)
        self._details.create_education(details, created_by=actor.employee_id)
        return details

    def get_education(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> EducationDetails:
        details = self._details.get_education(self._target(actor, employee_id))
        if not details:
            raise NotFoundError("Education details not found")
        return details

    def update_education(self, *, actor: CurrentUser, data: Mapping[str, Any]) -> EducationDetails:
        target = self._target(actor, data.get("employee_id"))
        current = self._details.get_education(target)
        if not current:
            raise NotFoundError("Education details not found")
        details = self._education_from(target, {**current.to_dict(), **data})
        fields = {k: getattr(details, k) for k in details.__dataclass_fields__ if k != "employee_id"}
        self._details.update_education(target, fields)
        return details

    # Files
    def upload_document(
        self,
        *,
        actor: CurrentUser,
        doc_type: str,
        file: FileStorage,
        employee_id: Optional[str] = None,
    ) -> EmployeeDocument:
        target = self._target(actor, employee_id)
        doc_type = require_choice(doc_type, tuple(DOCUMENT_TYPES), "doc_type")
        stored = self._uploads.save(file, subdir=f"documents/{target}", allowed=DOCUMENT_TYPES[doc_type])
        document = EmployeeDocument(
            employee_id=target,
            doc_type=doc_type,
            file_path=stored.path,
            original_name=stored.original_name,
        )
        self._details.upsert_document(document, uploaded_by=actor.employee_id)
        logger.info("document %s uploaded for %s by %s", doc_type, target, actor.employee_id)
        return document

    def upload_photo(self, *, actor: CurrentUser, file: FileStorage, employee_id: Optional[str] = None) -> str:
        target = self._target(actor, employee_id)
        stored = self._uploads.save(file, subdir="photos", allowed=PHOTO_EXTENSIONS)
        self._employees.set_photo(employee_id=target, photo_path=stored.path)
        return stored.path

    def progress(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> dict:
        """Share of onboarding sections completed, as a whole percentage."""
        target = self._target(actor, employee_id)
        employee = self._employees.get_by_employee_id(target)
        done = {
            "personal": self._details.get_personal(target) is not None,
            "education": self._details.get_education(target) is not None,
            "bank": self._details.get_bank(target) is not None,
            "documents": bool(self._details.list_documents(target)),
            "photo": bool(employee and employee.photo_path),
        }
        percent = round(100 * sum(done.values()) / len(PROGRESS_SECTIONS))
        return {"employee_id": target, "sections": done, "progress": percent}
