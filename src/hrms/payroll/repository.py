from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from .model import PayrollRecord


class PayrollRepository(Protocol):
    def get(self, *, employee_id: str, month: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def insert(self, record: PayrollRecord) -> bool:
        """Insert unless a row for (employee, month) already exists."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        month: Optional[str] = None,
        employee_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[PayrollRecord], int]:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[PayrollRecord]:
        raise NotImplementedError
