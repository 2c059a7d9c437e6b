from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollBreakdown, SalaryInput


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, salary: SalaryInput) -> PayrollBreakdown:
        raise NotImplementedError
