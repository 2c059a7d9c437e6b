from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import APPROVER_ROLES, Role


@dataclass(frozen=True)
class CurrentUser:
    """Identity decoded from the access token for the duration of a request."""

    id: int
    employee_id: str
    role: Role
    mobile: str
    email: Optional[str] = None
    department_id: Optional[int] = None

    @property
    def is_approver(self) -> bool:
        return self.role in APPROVER_ROLES

    def to_claims(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "role": self.role.value,
            "mobile": self.mobile,
            "email": self.email,
            "department": self.department_id,
        }

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentUser":
        return cls(
            id=int(claims["id"]),
            employee_id=str(claims["employee_id"]),
            role=Role(claims["role"]),
            mobile=str(claims.get("mobile") or ""),
            email=claims.get("email"),
            department_id=claims.get("department"),
        )


@dataclass(frozen=True)
class LoginResult:
    token: str
    id: int
    employee_id: str
    name: str
    role: Role
    mobile: str
    email: Optional[str]
    department_id: Optional[int]
    is_temporary_password: bool

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "id": self.id,
            "employee_id": self.employee_id,
            "name": self.name,
            "role": self.role.value,
            "mobile": self.mobile,
            "email": self.email,
            "department": self.department_id,
            "isTemporaryPassword": self.is_temporary_password,
        }
