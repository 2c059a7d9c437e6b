from __future__ import annotations

from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..auth.model import CurrentUser
from ..common.datetime_utils import require_iso_date, today_local
from ..common.logging import get_logger
from ..common.validators import parse_flag, require_enum, require_non_empty
from ..core.approvals import ensure_can_decide, parse_decision
from ..core.enums import LeaveType, RequestStatus, Role, recipient_for
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..organization.repository import HolidayRepository
from .day_count import count_leave_days, working_days
from .model import ApprovalOutcome, Leave, LeaveBalance
from .repository import LeaveRepository

logger = get_logger(__name__)


class LeaveService:
    """Leave application, approval and balance queries."""

    def __init__(
        self,
        leaves: LeaveRepository,
        holidays: HolidayRepository,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._leaves = leaves
        self._holidays = holidays
        self._today = today

    def apply_leave(
        self,
        *,
        actor: CurrentUser,
        leave_type: str,
        start_date: str,
        end_date: str,
        reason: str,
        half_day: Any = False,
    ) -> Leave:
        half_day = parse_flag(half_day)
        kind = require_enum(leave_type, LeaveType, "leave_type")
        start = require_iso_date(start_date, "start_date")
        end = require_iso_date(end_date, "end_date")
        reason = require_non_empty(reason, "reason")

        if end < start:
            raise ValidationError("end_date must be on or after start_date")
        if start.year != end.year:
            raise ValidationError("Leave cannot span two calendar years")
        if half_day and start != end:
            raise ValidationError("A half-day leave must start and end on the same date")

        holidays = self._holidays.dates_between(start, end)
        total = count_leave_days(start, end, holidays, half_day=half_day)
        if total <= 0:
            raise ValidationError("The selected range has no working days")

        if self._leaves.has_overlap(employee_id=actor.employee_id, start_date=start, end_date=end):
            raise ValidationError("Leave overlaps an existing pending or approved leave")

        if kind.is_paid:
            balance = self._leaves.get_balance(employee_id=actor.employee_id, leave_type=kind, year=start.year)
            remaining = balance.remaining if balance else 0
            if remaining < total:
                raise ValidationError(f"Insufficient {kind.value} leave balance: {float(remaining):g} day(s) left")

        recipient = recipient_for(actor.role).value
        leave_status = "Paid" if kind.is_paid else "Unpaid"
        leave_id = self._leaves.create_leave(
            employee_id=actor.employee_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            is_half_day=half_day,
            total_days=total,
            reason=reason,
            leave_status=leave_status,
            recipient=recipient,
        )
        logger.info("leave %s applied by %s (%s, %s days)", leave_id, actor.employee_id, kind.value, total)
        return Leave(
            id=leave_id,
            employee_id=actor.employee_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            total_days=total,
            reason=reason,
            status=RequestStatus.PENDING,
            leave_status=leave_status,
            recipient=recipient,
            is_half_day=half_day,
        )

    def decide_leave(self, *, actor: CurrentUser, leave_id: int, status: str, comment: str = "") -> Leave:
        decision = parse_decision(status)
        leave = self._leaves.get_leave(leave_id=int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        ensure_can_decide(actor, owner_employee_id=leave.employee_id, recipient=leave.recipient)
        if leave.status != RequestStatus.PENDING:
            raise ValidationError("Leave request has already been processed")

        note = (comment or "").strip() or None
        if decision is RequestStatus.REJECTED:
            if not self._leaves.reject_leave(leave_id=leave.id, approved_by=actor.employee_id, comment=note):
                raise ValidationError("Leave request has already been processed")
        else:
            holidays = self._holidays.dates_between(leave.start_date, leave.end_date)
            days = working_days(leave.start_date, leave.end_date, holidays)
            outcome = self._leaves.approve_leave(
                leave_id=leave.id,
                approved_by=actor.employee_id,
                comment=note,
                attendance_days=days,
            )
            if outcome is ApprovalOutcome.NOT_PENDING:
                raise ValidationError("Leave request has already been processed")
            if outcome is ApprovalOutcome.INSUFFICIENT_BALANCE:
                raise ValidationError("Insufficient leave balance to approve this request")

        logger.info("leave %s %s by %s", leave.id, decision.value.lower(), actor.employee_id)
        return self._leaves.get_leave(leave_id=leave.id) or leave

    def cancel_leave(self, *, actor: CurrentUser, leave_id: int) -> None:
        leave = self._leaves.get_leave(leave_id=int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        if leave.employee_id != actor.employee_id:
            raise AuthorizationError("You can only cancel your own leave requests")
        if leave.status != RequestStatus.PENDING:
            raise ValidationError("Only pending leave requests can be cancelled")
        if not self._leaves.delete_pending_leave(leave_id=leave.id, employee_id=actor.employee_id):
            raise ValidationError("Only pending leave requests can be cancelled")
        logger.info("leave %s cancelled by %s", leave.id, actor.employee_id)

    def list_leaves(
        self,
        *,
        actor: CurrentUser,
        status: Optional[str] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        mine: bool = False,
    ) -> Sequence[Leave]:
        """Own leaves for requesters; the approval queue for hr and super_admin."""
        status_filter = require_enum(status, RequestStatus, "status") if status else None
        start = require_iso_date(start_date, "start_date") if start_date else None
        end = require_iso_date(end_date, "end_date") if end_date else None

        if mine or not actor.is_approver:
            return self._leaves.list_leaves(employee_id=actor.employee_id, status=status_filter, start=start, end=end)

        recipient = None if actor.role is Role.SUPER_ADMIN else actor.role.value
        return self._leaves.list_leaves(
            employee_id=employee_id or None,
            recipient=recipient,
            status=status_filter,
            start=start,
            end=end,
        )

    def get_balances(
        self,
        *,
        actor: CurrentUser,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveBalance]:
        target = employee_id or actor.employee_id
        if target != actor.employee_id and not actor.is_approver:
            raise AuthorizationError("You can only view your own leave balances")
        return self._leaves.list_balances(year=int(year or self._today().year), employee_id=target)
