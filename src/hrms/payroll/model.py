from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class SalaryInput:
    basic_salary: Decimal
    allowances: Decimal
    bonuses: Decimal
    working_days: int
    unpaid_days: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    basic_salary: Decimal
    hra: Decimal
    da: Decimal
    other_allowances: Decimal
    bonuses: Decimal
    gross_salary: Decimal
    unpaid_deduction: Decimal
    pf_deduction: Decimal
    esic_deduction: Decimal
    professional_tax: Decimal
    tax_deduction: Decimal
    net_salary: Decimal

    @property
    def adjusted_gross(self) -> Decimal:
        return self.gross_salary - self.unpaid_deduction

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.unpaid_deduction
            + self.pf_deduction
            + self.esic_deduction
            + self.professional_tax
            + self.tax_deduction
        )


@dataclass(frozen=True)
class MonthSummary:
    paid_leave_days: Decimal
    unpaid_leave_days: Decimal
    present_days: int
    holidays: int
    total_working_days: int

    def to_dict(self) -> dict:
        return {
            "paid_leave_days": float(self.paid_leave_days),
            "unpaid_leave_days": float(self.unpaid_leave_days),
            "present_days": self.present_days,
            "holidays": self.holidays,
            "total_working_days": self.total_working_days,
        }


@dataclass(frozen=True)
class PayrollRecord:
    employee_id: str
    employee_name: str
    month: str
    breakdown: PayrollBreakdown
    summary: MonthSummary
    status: PayrollStatus
    payment_method: str
    department: Optional[str] = None
    designation_name: Optional[str] = None
    payment_date: Optional[date] = None
    created_by: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> dict:
        b = self.breakdown
        data = {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department": self.department,
            "designation_name": self.designation_name,
            "month": self.month,
            "status": self.status.value,
            "payment_method": self.payment_method,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "created_by": self.created_by,
        }
        for name in b.__dataclass_fields__:
            data[name] = float(getattr(b, name))
        data.update(self.summary.to_dict())
        return data


@dataclass(frozen=True)
class GenerationReport:
    month: str
    created: tuple
    skipped_existing: tuple
    skipped_no_salary: tuple

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "created": list(self.created),
            "skipped_existing": list(self.skipped_existing),
            "skipped_no_salary": list(self.skipped_no_salary),
        }
