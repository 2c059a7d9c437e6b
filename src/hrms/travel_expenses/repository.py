from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import RequestStatus
from .model import ExpenseItem, NewTravelExpense, TravelExpense


class TravelExpenseRepository(Protocol):
    def create(self, expense: NewTravelExpense) -> int:
        """Insert the expense and its items in one transaction."""

        raise NotImplementedError

    def get(self, expense_id: int) -> Optional[TravelExpense]:
        raise NotImplementedError

    def list_expenses(
        self,
        *,
        statuses: Sequence[RequestStatus],
        employee_id: Optional[str] = None,
        department_id: Optional[int] = None,
        submitted_to: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[Sequence[TravelExpense], int]:
        raise NotImplementedError

    def update_pending(
        self,
        *,
        expense_id: int,
        fields: Mapping[str, object],
        items: Optional[Sequence[ExpenseItem]] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_pending(self, expense_id: int) -> bool:
        raise NotImplementedError

    def decide(self, *, expense_id: int, status: RequestStatus, approved_by: str, comment: Optional[str]) -> bool:
        raise NotImplementedError

    def count_pending(self, *, submitted_to: Optional[str] = None) -> int:
        raise NotImplementedError
