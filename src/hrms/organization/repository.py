from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Set

from .model import Company, Department, Holiday


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, name: str) -> int:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_for_year(self, year: int) -> Sequence[Holiday]:
        raise NotImplementedError

    def dates_between(self, start: date, end: date) -> Set[date]:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(self, *, holiday_date: date, description: str, type: str) -> int:
        raise NotImplementedError

    def update(self, *, holiday_id: int, holiday_date: date, description: str, type: str) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError


class CompanyRepository(Protocol):
    def get(self) -> Optional[Company]:
        raise NotImplementedError
