from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import EmployeeStatus, LeaveType, Role
from .model import BankDetails, EducationDetails, Employee, EmployeeDocument, NewEmployee, PersonalDetails


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_mobile_role(self, mobile: str, role: Role) -> Optional[Employee]:
        raise NotImplementedError

    def get_password_hash(self, user_id: int) -> Optional[str]:
        raise NotImplementedError

    def update_password(self, *, user_id: int, password_hash: str, is_temporary: bool) -> bool:
        raise NotImplementedError

    def next_employee_id(self) -> str:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        new: NewEmployee,
        password_hash: str,
        leave_allocation: Mapping[LeaveType, Decimal],
        allocation_year: int,
        allocation_period: str,
    ) -> int:
        """Insert the user and seed its leave balances in one transaction.

        The allocation is credited only when the monthly allocation job has
        already completed for ``allocation_period``; otherwise the balances
        start at zero and the job credits the new employee with everyone else.
        Raises ValidationError when a unique key (employee id, mobile+role) clashes.
        """

        raise NotImplementedError

    def list_employees(
        self,
        *,
        role: Optional[Role] = None,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[Employee], int]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update_employee(self, *, user_id: int, fields: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def set_photo(self, *, employee_id: str, photo_path: str) -> bool:
        raise NotImplementedError

    def terminate(self, *, employee_id: str, reason: str, termination_date: date, actor_id: str) -> bool:
        """Deactivate and reject the employee's pending requests atomically."""

        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError


class EmployeeDetailsRepository(Protocol):
    def get_personal(self, employee_id: str) -> Optional[PersonalDetails]:
        raise NotImplementedError

    def create_personal(self, details: PersonalDetails, *, created_by: str) -> None:
        raise NotImplementedError

    def update_personal(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def get_bank(self, employee_id: str) -> Optional[BankDetails]:
        raise NotImplementedError

    def create_bank(self, details: BankDetails, *, created_by: str) -> None:
        raise NotImplementedError

    def update_bank(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def get_education(self, employee_id: str) -> Optional[EducationDetails]:
        raise NotImplementedError

    def create_education(self, details: EducationDetails, *, created_by: str) -> None:
        raise NotImplementedError

    def update_education(self, employee_id: str, fields: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def list_documents(self, employee_id: str) -> Sequence[EmployeeDocument]:
        raise NotImplementedError

    def upsert_document(self, document: EmployeeDocument, *, uploaded_by: str) -> None:
        raise NotImplementedError
