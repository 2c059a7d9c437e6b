from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.logging import get_logger
from ..common.validators import require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import CurrentUser, LoginResult
from .tokens import TokenCodec

logger = get_logger(__name__)


class AuthService:
    """Use case: authenticate users and manage their passwords."""

    def __init__(self, employees: EmployeeRepository, tokens: TokenCodec):
        self._employees = employees
        self._tokens = tokens

    def login(self, *, mobile: str, password: str, role: str) -> LoginResult:
        mobile = require_non_empty(mobile, "mobile")
        require_non_empty(password, "password")
        role_enum = require_enum(role, Role, "role")

        employee = self._employees.get_by_mobile_role(mobile, role_enum)
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid mobile number or role")

        password_hash = self._employees.get_password_hash(employee.id) or ""
        try:
            ok = check_password_hash(password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False
        if not ok:
            logger.warning("failed login for %s/%s", mobile, role_enum.value)
            raise AuthenticationError("Invalid password")

        user = CurrentUser(
            id=employee.id,
            employee_id=employee.employee_id,
            role=employee.role,
            mobile=employee.mobile,
            email=employee.email,
            department_id=employee.department_id,
        )
        logger.info("login %s (%s)", employee.employee_id, employee.role.value)
        return LoginResult(
            token=self._tokens.encode(user),
            id=employee.id,
            employee_id=employee.employee_id,
            name=employee.name,
            role=employee.role,
            mobile=employee.mobile,
            email=employee.email,
            department_id=employee.department_id,
            is_temporary_password=employee.is_temporary_password,
        )

    def change_password(self, *, actor: CurrentUser, current_password: str, new_password: str) -> None:
        require_non_empty(current_password, "currentPassword")
        require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)

        password_hash = self._employees.get_password_hash(actor.id)
        if password_hash is None:
            raise NotFoundError("User not found")
        if not check_password_hash(password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current password")

        self._employees.update_password(
            user_id=actor.id,
            password_hash=generate_password_hash(new_password),
            is_temporary=False,
        )
        logger.info("password changed for %s", actor.employee_id)

    def forgot_password(self, *, mobile: str, role: str, new_password: str) -> None:
        mobile = require_non_empty(mobile, "mobile")
        role_enum = require_enum(role, Role, "role")
        require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)

        employee = self._employees.get_by_mobile_role(mobile, role_enum)
        if not employee:
            raise NotFoundError("No account found for this mobile number and role")

        self._employees.update_password(
            user_id=employee.id,
            password_hash=generate_password_hash(new_password),
            is_temporary=False,
        )
        logger.info("password reset for %s", employee.employee_id)

    def check_mobile_role(self, *, mobile: str, role: str) -> bool:
        mobile = require_non_empty(mobile, "mobile")
        role_enum = require_enum(role, Role, "role")
        if not self._employees.get_by_mobile_role(mobile, role_enum):
            raise NotFoundError("No account found for this mobile number and role")
        return True
