from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from werkzeug.security import generate_password_hash

from ..auth.model import CurrentUser
from ..common.datetime_utils import month_key, require_iso_date, today_local
from ..common.logging import get_logger
from ..common.validators import page_params, parse_money, require_enum, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MONTHLY_LEAVE_ALLOCATION, TEMP_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..organization.repository import DepartmentRepository
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = get_logger(__name__)

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class CreatedEmployee:
    employee: Employee
    temporary_password: str


class EmployeeService:
    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        today: Callable[[], date] = today_local,
        password_factory: Callable[[], str] = generate_temporary_password,
    ):
        self._employees = employees
        self._departments = departments
        self._today = today
        self._password_factory = password_factory

    @staticmethod
    def _require_approver(actor: CurrentUser) -> None:
        if not actor.is_approver:
            raise AuthorizationError("Access denied")

    @staticmethod
    def _ensure_may_manage(actor: CurrentUser, target_role: Role) -> None:
        if target_role is Role.SUPER_ADMIN:
            raise AuthorizationError("Super admin accounts cannot be managed here")
        if target_role is Role.HR and actor.role is not Role.SUPER_ADMIN:
            raise AuthorizationError("Only super admin can manage HR accounts")

    def _check_department(self, department_id: Any) -> Optional[int]:
        if department_id in (None, ""):
            return None
        try:
            dept_id = int(department_id)
        except (TypeError, ValueError):
            raise ValidationError("department_id must be an integer") from None
        if not self._departments.get_by_id(dept_id):
            raise ValidationError("Department not found")
        return dept_id

    def create_employee(self, *, actor: CurrentUser, payload: Mapping[str, Any]) -> CreatedEmployee:
        self._require_approver(actor)
        role = require_enum(payload.get("role") or Role.EMPLOYEE.value, Role, "role")
        self._ensure_may_manage(actor, role)

        name = require_non_empty(payload.get("name"), "name")
        mobile = require_non_empty(payload.get("mobile"), "mobile")
        if self._employees.get_by_mobile_role(mobile, role):
            raise ValidationError("An account with this mobile and role already exists")

        employee_id = (payload.get("employee_id") or "").strip()
        if employee_id:
            if self._employees.get_by_employee_id(employee_id):
                raise ValidationError("Employee ID already exists")
        else:
            employee_id = self._employees.next_employee_id()

        joining = payload.get("joining_date")
        new = NewEmployee(
            employee_id=employee_id,
            name=name,
            mobile=mobile,
            role=role,
            email=(payload.get("email") or "").strip() or None,
            department_id=self._check_department(payload.get("department_id")),
            designation=(payload.get("designation") or "").strip() or None,
            basic_salary=parse_money(payload.get("basic_salary", 0), "basic_salary"),
            allowances=parse_money(payload.get("allowances", 0), "allowances"),
            bonuses=parse_money(payload.get("bonuses", 0), "bonuses"),
            joining_date=require_iso_date(joining, "joining_date") if joining else self._today(),
        )

        password = self._password_factory()
        today = self._today()
        user_id = self._employees.create_employee(
            new=new,
            password_hash=generate_password_hash(password),
            leave_allocation=MONTHLY_LEAVE_ALLOCATION,
            allocation_year=today.year,
            allocation_period=month_key(today),
        )
        logger.info("employee %s (%s) created by %s", new.employee_id, role.value, actor.employee_id)
        created = self._employees.get_by_id(user_id)
        if not created:
            raise NotFoundError("Employee not found after create")
        return CreatedEmployee(employee=created, temporary_password=password)

    def list_employees(
        self,
        *,
        actor: CurrentUser,
        role: Optional[str] = None,
        department_id: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Sequence[Employee], int, int, int]:
        """Return (rows, total, page, limit); dept heads see their own department."""
        if actor.role is Role.DEPT_HEAD:
            department_id = actor.department_id
            if not department_id:
                return [], 0, 1, DEFAULT_PAGE_SIZE
        else:
            self._require_approver(actor)

        page_i, limit_i = page_params(page, limit, default_limit=DEFAULT_PAGE_SIZE, max_limit=MAX_PAGE_SIZE)
        rows, total = self._employees.list_employees(
            role=require_enum(role, Role, "role") if role else None,
            department_id=int(department_id) if department_id else None,
            status=require_enum(status, EmployeeStatus, "status") if status else None,
            page=page_i,
            limit=limit_i,
        )
        return rows, total, page_i, limit_i

    def get_employee(self, *, actor: CurrentUser, employee_id: str) -> Employee:
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if actor.is_approver or actor.employee_id == employee.employee_id:
            return employee
        if actor.role is Role.DEPT_HEAD and actor.department_id and actor.department_id == employee.department_id:
            return employee
        raise AuthorizationError("Access denied")

    def get_profile(self, *, actor: CurrentUser) -> Employee:
        employee = self._employees.get_by_id(actor.id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def update_employee(self, *, actor: CurrentUser, employee_id: str, payload: Mapping[str, Any]) -> Employee:
        self._require_approver(actor)
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.employee_id != actor.employee_id:
            self._ensure_may_manage(actor, employee.role)

        fields: dict = {}
        for key in ("name", "mobile"):
            if key in payload:
                fields[key] = require_non_empty(payload.get(key), key)
        for key in ("email", "designation"):
            if key in payload:
                fields[key] = (payload.get(key) or "").strip() or None
        for key in ("basic_salary", "allowances", "bonuses"):
            if key in payload:
                fields[key] = parse_money(payload.get(key), key)
        if "department_id" in payload:
            fields["department_id"] = self._check_department(payload.get("department_id"))
        if "joining_date" in payload:
            fields["joining_date"] = require_iso_date(payload.get("joining_date"), "joining_date")
        if not fields:
            raise ValidationError("No updatable fields supplied")

        if "mobile" in fields and fields["mobile"] != employee.mobile:
            clash = self._employees.get_by_mobile_role(fields["mobile"], employee.role)
            if clash and clash.id != employee.id:
                raise ValidationError("An account with this mobile and role already exists")

        self._employees.update_employee(user_id=employee.id, fields=fields)
        logger.info("employee %s updated by %s: %s", employee.employee_id, actor.employee_id, sorted(fields))
        return self._employees.get_by_id(employee.id) or employee

    def terminate_employee(
        self,
        *,
        actor: CurrentUser,
        employee_id: str,
        reason: str,
        termination_date: Optional[str] = None,
    ) -> Employee:
        self._require_approver(actor)
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.employee_id == actor.employee_id:
            raise AuthorizationError("You cannot terminate your own account")
        self._ensure_may_manage(actor, employee.role)
        if not employee.is_active:
            raise ValidationError("Employee is already inactive")

        reason = require_non_empty(reason, "reason")
        when = require_iso_date(termination_date, "termination_date") if termination_date else self._today()
        if not self._employees.terminate(
            employee_id=employee.employee_id,
            reason=reason,
            termination_date=when,
            actor_id=actor.employee_id,
        ):
            raise ValidationError("Employee is already inactive")
        logger.info("employee %s terminated by %s", employee.employee_id, actor.employee_id)
        return self._employees.get_by_id(employee.id) or employee
