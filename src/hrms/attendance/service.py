from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..auth.model import CurrentUser
from ..common.datetime_utils import month_bounds, now_local, parse_month, require_iso_date, require_time
from ..common.logging import get_logger
from ..common.validators import require_enum
from ..core.approvals import ensure_can_decide, parse_decision
from ..core.enums import AttendanceStatus, RequestStatus, Role, recipient_for
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = get_logger(__name__)

_MARKABLE = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.HALF_DAY)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, *, clock: Callable[[], datetime] = now_local):
        self._attendance = attendance
        self._clock = clock

    def mark_attendance(
        self,
        *,
        actor: CurrentUser,
        day: Optional[str] = None,
        login_time: Optional[str] = None,
        logout_time: Optional[str] = None,
        status: Optional[str] = None,
    ) -> AttendanceRecord:
        """Record login for a day, or close the day's open record with a logout time."""
        now = self._clock()
        work_date: date = require_iso_date(day, "date") if day else now.date()
        if work_date > now.date():
            raise ValidationError("Attendance cannot be marked for a future date")

        existing = self._attendance.get_for_employee_and_date(actor.employee_id, work_date)
        if existing:
            if existing.status is AttendanceStatus.LEAVE:
                raise ValidationError("You are on approved leave for this date")
            if existing.logout_time is not None:
                raise ValidationError("Attendance already marked for this date")
            logout = require_time(logout_time, "logout_time") if logout_time else now.time().replace(microsecond=0)
            if existing.login_time and logout <= existing.login_time:
                raise ValidationError("logout_time must be after login_time")
            if not self._attendance.set_logout(record_id=existing.id, logout_time=logout):
                raise ValidationError("Attendance already marked for this date")
            logger.info("attendance %s logout recorded for %s", existing.id, actor.employee_id)
            return self._attendance.get_by_id(existing.id) or existing

        if login_time:
            login = require_time(login_time, "login_time")
        elif work_date == now.date():
            login = now.time().replace(microsecond=0)
        else:
            raise ValidationError("login_time is required for a past date")
        logout = require_time(logout_time, "logout_time") if logout_time else None
        if logout is not None and logout <= login:
            raise ValidationError("logout_time must be after login_time")

        mark = require_enum(status, AttendanceStatus, "status") if status else AttendanceStatus.PRESENT
        if mark not in _MARKABLE:
            raise ValidationError("Leave attendance is created by leave approval")

        recipient = recipient_for(actor.role).value
        record_id = self._attendance.create(
            employee_id=actor.employee_id,
            day=work_date,
            login_time=login,
            logout_time=logout,
            status=mark,
            recipient=recipient,
        )
        logger.info("attendance %s marked by %s for %s", record_id, actor.employee_id, work_date)
        return AttendanceRecord(
            id=record_id,
            employee_id=actor.employee_id,
            date=work_date,
            status=mark,
            approval_status=RequestStatus.PENDING,
            recipient=recipient,
            login_time=login,
            logout_time=logout,
        )

    def list_my_attendance(self, *, actor: CurrentUser, month: Optional[str] = None) -> Sequence[AttendanceRecord]:
        if month:
            year, mon = parse_month(month)
        else:
            today = self._clock().date()
            year, mon = today.year, today.month
        start, end = month_bounds(year, mon)
        return self._attendance.list_for_employee(actor.employee_id, start, end)

    def list_attendance(
        self,
        *,
        actor: CurrentUser,
        day: Optional[str] = None,
        employee_id: Optional[str] = None,
        approval_status: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        if not actor.is_approver:
            raise AuthorizationError("Access denied")
        return self._attendance.list_records(
            recipient=None if actor.role is Role.SUPER_ADMIN else actor.role.value,
            day=require_iso_date(day, "date") if day else None,
            employee_id=employee_id or None,
            approval_status=require_enum(approval_status, RequestStatus, "approval_status") if approval_status else None,
        )

    def decide_attendance(self, *, actor: CurrentUser, record_id: int, status: str) -> AttendanceRecord:
        decision = parse_decision(status)
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        ensure_can_decide(actor, owner_employee_id=record.employee_id, recipient=record.recipient)
        if record.approval_status != RequestStatus.PENDING:
            raise ValidationError("Attendance record has already been processed")
        if not self._attendance.decide(record_id=record.id, status=decision, approved_by=actor.employee_id):
            raise ValidationError("Attendance record has already been processed")
        logger.info("attendance %s %s by %s", record.id, decision.value.lower(), actor.employee_id)
        return self._attendance.get_by_id(record.id) or record
