from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus, RequestStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (employee, date); rows linked to a leave carry ``leave_id``."""

    id: int
    employee_id: str
    date: date
    status: AttendanceStatus
    approval_status: RequestStatus
    recipient: str
    login_time: Optional[time] = None
    logout_time: Optional[time] = None
    approved_by: Optional[str] = None
    leave_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "login_time": self.login_time.strftime("%H:%M:%S") if self.login_time else None,
            "logout_time": self.logout_time.strftime("%H:%M:%S") if self.logout_time else None,
            "status": self.status.value,
            "approval_status": self.approval_status.value,
            "recipient": self.recipient,
            "approved_by": self.approved_by,
            "leave_id": self.leave_id,
        }
