from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import (
    DA_SHARE,
    ESIC_CEILING,
    ESIC_RATE,
    HRA_SHARE,
    INCOME_TAX_SLABS,
    INCOME_TAX_TOP_RATE,
    OTHER_ALLOWANCE_SHARE,
    PF_CAP,
    PF_RATE,
    PROFESSIONAL_TAX,
    PROFESSIONAL_TAX_THRESHOLD,
)
from ..model import PayrollBreakdown, SalaryInput
from .base import PayrollCalculator

PAISE = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(PAISE, rounding=ROUND_HALF_UP)


def income_tax_rate(annual_income: Decimal) -> Decimal:
    """Flat slab rate applied to the whole annual amount."""
    for ceiling, rate in INCOME_TAX_SLABS:
        if annual_income <= ceiling:
            return rate
    return INCOME_TAX_TOP_RATE


class StandardPayrollCalculator(PayrollCalculator):
    """Indian statutory deductions on a monthly salary, prorated for unpaid leave."""

    def calculate(self, salary: SalaryInput) -> PayrollBreakdown:
        basic = Decimal(salary.basic_salary)
        allowances = Decimal(salary.allowances)
        bonuses = Decimal(salary.bonuses)
        gross = basic + allowances + bonuses

        if salary.working_days > 0 and salary.unpaid_days > 0:
            unpaid = min(Decimal(salary.unpaid_days), Decimal(salary.working_days))
            unpaid_deduction = gross * unpaid / Decimal(salary.working_days)
            paid_factor = (Decimal(salary.working_days) - unpaid) / Decimal(salary.working_days)
        else:
            unpaid_deduction = Decimal("0")
            paid_factor = Decimal("1")

        adjusted_gross = money(gross - unpaid_deduction)
        pf = money(min(basic * paid_factor * PF_RATE, PF_CAP))
        esic = money(adjusted_gross * ESIC_RATE) if adjusted_gross <= ESIC_CEILING else Decimal("0.00")
        professional_tax = Decimal("0.00") if adjusted_gross <= PROFESSIONAL_TAX_THRESHOLD else money(PROFESSIONAL_TAX)
        annual = adjusted_gross * 12
        tax = money(annual * income_tax_rate(annual) / 12)

        gross = money(gross)
        unpaid_deduction = money(unpaid_deduction)
        net = gross - unpaid_deduction - pf - esic - professional_tax - tax

        return PayrollBreakdown(
            basic_salary=money(basic),
            hra=money(allowances * HRA_SHARE),
            da=money(allowances * DA_SHARE),
            other_allowances=money(allowances * OTHER_ALLOWANCE_SHARE),
            bonuses=money(bonuses),
            gross_salary=gross,
            unpaid_deduction=unpaid_deduction,
            pf_deduction=pf,
            esic_deduction=esic,
            professional_tax=professional_tax,
            tax_deduction=tax,
            net_salary=net,
        )
