from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role strings stored in hrms_users.role and carried in the access token."""

    SUPER_ADMIN = "super_admin"
    HR = "hr"
    DEPT_HEAD = "dept_head"
    MANAGER = "manager"
    EMPLOYEE = "employee"


APPROVER_ROLES = frozenset({Role.SUPER_ADMIN, Role.HR})


class RequestStatus(str, Enum):
    """Three-state approval flow shared by attendance, leave and travel expenses."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    LEAVE = "Leave"


class LeaveType(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    EARNED = "earned"
    UNPAID = "unpaid"

    @property
    def is_paid(self) -> bool:
        return self is not LeaveType.UNPAID


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PayrollStatus(str, Enum):
    PAID = "Paid"
    PENDING = "Pending"


class GoalStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    AT_RISK = "At Risk"


class JobStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def recipient_for(role: Role) -> Role:
    """Approver role for requests raised by ``role``."""

    if role in {Role.HR, Role.SUPER_ADMIN}:
        return Role.SUPER_ADMIN
    return Role.HR
