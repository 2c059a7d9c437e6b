from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import ApprovalOutcome, Leave, LeaveBalance


class LeaveRepository(Protocol):
    def create_leave(
        self,
        *,
        employee_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        is_half_day: bool,
        total_days: Decimal,
        reason: str,
        leave_status: str,
        recipient: str,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, *, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[str] = None,
        recipient: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[Leave]:
        """Leaves overlapping [start, end] when given, newest first."""

        raise NotImplementedError

    def has_overlap(self, *, employee_id: str, start_date: date, end_date: date) -> bool:
        """True when a Pending or Approved leave intersects the range."""

        raise NotImplementedError

    def get_balance(self, *, employee_id: str, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_balances(self, *, year: int, employee_id: Optional[str] = None) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def approve_leave(
        self,
        *,
        leave_id: int,
        approved_by: str,
        comment: Optional[str],
        attendance_days: Sequence[date],
    ) -> ApprovalOutcome:
        """Deduct balance, flip status and write attendance rows atomically."""

        raise NotImplementedError

    def reject_leave(self, *, leave_id: int, approved_by: str, comment: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_pending_leave(self, *, leave_id: int, employee_id: str) -> bool:
        raise NotImplementedError

    def count_pending(self, *, recipient: Optional[str] = None) -> int:
        raise NotImplementedError
