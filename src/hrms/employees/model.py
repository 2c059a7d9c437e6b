from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Employee:
    """Row of hrms_users joined with its department name."""

    id: int
    employee_id: str
    name: str
    mobile: str
    role: Role
    email: Optional[str] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    designation: Optional[str] = None
    basic_salary: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    bonuses: Decimal = Decimal("0")
    joining_date: Optional[date] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    is_temporary_password: bool = False
    termination_reason: Optional[str] = None
    termination_date: Optional[date] = None
    photo_path: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE

    @property
    def has_salary(self) -> bool:
        return self.basic_salary > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "name": self.name,
            "mobile": self.mobile,
            "email": self.email,
            "role": self.role.value,
            "department_id": self.department_id,
            "department": self.department_name,
            "designation": self.designation,
            "basic_salary": float(self.basic_salary),
            "allowances": float(self.allowances),
            "bonuses": float(self.bonuses),
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            "status": self.status.value,
            "termination_reason": self.termination_reason,
            "termination_date": self.termination_date.isoformat() if self.termination_date else None,
        }


@dataclass(frozen=True)
class NewEmployee:
    employee_id: str
    name: str
    mobile: str
    role: Role
    email: Optional[str]
    department_id: Optional[int]
    designation: Optional[str]
    basic_salary: Decimal
    allowances: Decimal
    bonuses: Decimal
    joining_date: Optional[date]


def _jsonable(data: dict) -> dict:
    out = {}
    for key, value in data.items():
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        out[key] = value
    return out


@dataclass(frozen=True)
class PersonalDetails:
    employee_id: str
    full_name: str
    phone: str
    email: str
    gender: str
    present_address: str
    position_type: str
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    previous_address: Optional[str] = None
    employer_id_name: Optional[str] = None
    position_title: Optional[str] = None
    employment_type: Optional[str] = None
    joining_date: Optional[date] = None
    contract_end_date: Optional[date] = None

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class BankDetails:
    employee_id: str
    bank_account_number: str
    ifsc_number: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EducationDetails:
    employee_id: str
    tenth_class_name: Optional[str] = None
    tenth_class_marks: Optional[Decimal] = None
    intermediate_name: Optional[str] = None
    intermediate_marks: Optional[Decimal] = None
    graduation_name: Optional[str] = None
    graduation_marks: Optional[Decimal] = None
    postgraduation_name: Optional[str] = None
    postgraduation_marks: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class EmployeeDocument:
    employee_id: str
    doc_type: str
    file_path: str
    original_name: str

    def to_dict(self) -> dict:
        return {"employee_id": self.employee_id, "doc_type": self.doc_type, "original_name": self.original_name}
