from __future__ import annotations

from datetime import date, time
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, RequestStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        day: date,
        login_time: time,
        logout_time: Optional[time],
        status: AttendanceStatus,
        recipient: str,
    ) -> int:
        """Insert a Pending row; raises ValidationError when the day is already marked."""

        raise NotImplementedError

    def set_logout(self, *, record_id: int, logout_time: time) -> bool:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        recipient: Optional[str] = None,
        day: Optional[date] = None,
        employee_id: Optional[str] = None,
        approval_status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def decide(self, *, record_id: int, status: RequestStatus, approved_by: str) -> bool:
        raise NotImplementedError

    def status_tally(self, employee_id: str, start: date, end: date) -> Dict[str, int]:
        """Count rows per status, ignoring rejected ones."""

        raise NotImplementedError

    def count_pending(self, *, recipient: Optional[str] = None) -> int:
        raise NotImplementedError
