from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class Leave:
    id: int
    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: RequestStatus
    leave_status: str
    recipient: str
    is_half_day: bool = False
    approved_by: Optional[str] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "leave_type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_half_day": self.is_half_day,
            "total_days": float(self.total_days),
            "reason": self.reason,
            "status": self.status.value,
            "leave_status": self.leave_status,
            "recipient": self.recipient,
            "approved_by": self.approved_by,
            "comment": self.comment,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: str
    leave_type: LeaveType
    year: int
    allocated: Decimal
    used: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.allocated - self.used

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "leave_type": self.leave_type.value,
            "year": self.year,
            "allocated": float(self.allocated),
            "used": float(self.used),
            "remaining": float(self.remaining),
        }


class ApprovalOutcome(str, Enum):
    """Result of the single-transaction approval in the repository."""

    APPLIED = "applied"
    NOT_PENDING = "not_pending"
    INSUFFICIENT_BALANCE = "insufficient_balance"
