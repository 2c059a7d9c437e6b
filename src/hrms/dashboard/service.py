from __future__ import annotations

from datetime import date
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..auth.model import CurrentUser
from ..common.datetime_utils import month_bounds, month_key, today_local
from ..core.enums import AttendanceStatus, Role
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository
from ..travel_expenses.repository import TravelExpenseRepository


class DashboardService:
    """Role-scoped counters for the landing page."""

    def __init__(
        self,
        employees: EmployeeRepository,
        leaves: LeaveRepository,
        attendance: AttendanceRepository,
        expenses: TravelExpenseRepository,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._employees = employees
        self._leaves = leaves
        self._attendance = attendance
        self._expenses = expenses
        self._today = today

    def summary(self, *, actor: CurrentUser) -> dict:
        if actor.is_approver:
            # hr sees its own queue, super_admin sees everything
            recipient = None if actor.role is Role.SUPER_ADMIN else actor.role.value
            return {
                "role": actor.role.value,
                "active_employees": self._employees.count_active(),
                "pending_leaves": self._leaves.count_pending(recipient=recipient),
                "pending_attendance": self._attendance.count_pending(recipient=recipient),
                "pending_travel_expenses": self._expenses.count_pending(submitted_to=recipient),
            }

        today = self._today()
        start, end = month_bounds(today.year, today.month)
        tally = self._attendance.status_tally(actor.employee_id, start, end)
        balances = self._leaves.list_balances(year=today.year, employee_id=actor.employee_id)
        return {
            "role": actor.role.value,
            "month": month_key(today),
            "attendance": {s.value: tally.get(s.value, 0) for s in AttendanceStatus},
            "leave_balances": [b.to_dict() for b in balances],
        }
