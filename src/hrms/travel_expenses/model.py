from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class ExpenseItem:
    expense_date: date
    purpose: str
    amount: Decimal
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "expense_date": self.expense_date.isoformat(),
            "purpose": self.purpose,
            "amount": float(self.amount),
        }


@dataclass(frozen=True)
class TravelExpense:
    id: int
    employee_id: str
    travel_date: date
    destination: str
    travel_purpose: str
    total_amount: Decimal
    status: RequestStatus
    submitted_to: str
    submitted_by: str
    employee_name: Optional[str] = None
    department_id: Optional[int] = None
    approved_by: Optional[str] = None
    comment: Optional[str] = None
    receipt_path: Optional[str] = None
    created_at: Optional[datetime] = None
    items: Tuple[ExpenseItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department_id": self.department_id,
            "travel_date": self.travel_date.isoformat(),
            "destination": self.destination,
            "travel_purpose": self.travel_purpose,
            "total_amount": float(self.total_amount),
            "status": self.status.value,
            "submitted_to": self.submitted_to,
            "submitted_by": self.submitted_by,
            "approved_by": self.approved_by,
            "comment": self.comment,
            "has_receipt": bool(self.receipt_path),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "expenses": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True)
class NewTravelExpense:
    employee_id: str
    travel_date: date
    destination: str
    travel_purpose: str
    total_amount: Decimal
    status: RequestStatus
    submitted_to: str
    submitted_by: str
    approved_by: Optional[str]
    receipt_path: Optional[str]
    items: Tuple[ExpenseItem, ...]
