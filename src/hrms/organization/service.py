from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..auth.model import CurrentUser
from ..common.datetime_utils import require_iso_date
from ..common.logging import get_logger
from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Company, Department, Holiday
from .repository import CompanyRepository, DepartmentRepository, HolidayRepository

logger = get_logger(__name__)


def _require_approver(actor: CurrentUser) -> None:
    if not actor.is_approver:
        raise AuthorizationError("Access denied")


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def create_department(self, *, actor: CurrentUser, name: str) -> Department:
        _require_approver(actor)
        name = require_non_empty(name, "Department name")
        if self._departments.get_by_name(name):
            raise ValidationError("Department already exists")
        dept_id = self._departments.create(name=name)
        logger.info("department %s created by %s", name, actor.employee_id)
        return Department(id=dept_id, name=name)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_holidays(self, *, year: int) -> Sequence[Holiday]:
        return self._holidays.list_for_year(int(year))

    def create_holiday(self, *, actor: CurrentUser, holiday_date: str, description: str, type: str = "Public") -> Holiday:
        _require_approver(actor)
        day = require_iso_date(holiday_date, "holiday_date")
        description = require_non_empty(description, "description")
        if self._holidays.get_by_date(day):
            raise ValidationError("A holiday already exists on this date")
        holiday_id = self._holidays.create(holiday_date=day, description=description, type=type or "Public")
        return Holiday(id=holiday_id, holiday_date=day, description=description, type=type or "Public")

    def update_holiday(
        self,
        *,
        actor: CurrentUser,
        holiday_id: int,
        holiday_date: Optional[str] = None,
        description: Optional[str] = None,
        type: Optional[str] = None,
    ) -> Holiday:
        _require_approver(actor)
        current = self._holidays.get_by_id(int(holiday_id))
        if not current:
            raise NotFoundError("Holiday not found")

        day: date = require_iso_date(holiday_date, "holiday_date") if holiday_date else current.holiday_date
        clash = self._holidays.get_by_date(day)
        if clash and clash.id != current.id:
            raise ValidationError("A holiday already exists on this date")

        updated = Holiday(
            id=current.id,
            holiday_date=day,
            description=require_non_empty(description, "description") if description is not None else current.description,
            type=type or current.type,
        )
        self._holidays.update(
            holiday_id=updated.id,
            holiday_date=updated.holiday_date,
            description=updated.description,
            type=updated.type,
        )
        return updated

    def delete_holiday(self, *, actor: CurrentUser, holiday_id: int) -> None:
        _require_approver(actor)
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")


class CompanyService:
    def __init__(self, company: CompanyRepository, *, fallback: dict):
        self._company = company
        self._fallback = fallback

    def get_company(self) -> Company:
        """Stored company row, or the configured identity when none is stored."""
        company = self._company.get()
        if company:
            return company
        return Company(
            name=self._fallback.get("name", ""),
            address=self._fallback.get("address"),
            pan=self._fallback.get("pan"),
            gstin=self._fallback.get("gstin"),
            website=self._fallback.get("website"),
        )
