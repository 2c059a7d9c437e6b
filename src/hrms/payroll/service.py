from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from ..attendance.repository import AttendanceRepository
from ..auth.model import CurrentUser
from ..common.datetime_utils import month_bounds, month_key, parse_month, today_local
from ..common.logging import get_logger
from ..common.validators import page_params, parse_money, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import AttendanceStatus, PayrollStatus, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeDetailsRepository, EmployeeRepository
from ..leaves.day_count import working_days
from ..leaves.repository import LeaveRepository
from ..organization.model import Company
from ..organization.repository import HolidayRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator, money
from .model import GenerationReport, MonthSummary, PayrollBreakdown, PayrollRecord, SalaryInput
from .report_pdf import render_payroll_report
from .repository import PayrollRepository

logger = get_logger(__name__)

TOLERANCE = Decimal("0.01")


def _normalize_month(value: Optional[str]) -> str:
    year, mon = parse_month(value)
    return f"{year:04d}-{mon:02d}"


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        details: EmployeeDetailsRepository,
        leaves: LeaveRepository,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        today: Callable[[], date] = today_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._details = details
        self._leaves = leaves
        self._attendance = attendance
        self._holidays = holidays
        self._calculator = calculator or StandardPayrollCalculator()
        self._today = today

    @staticmethod
    def _require_approver(actor: CurrentUser) -> None:
        if not actor.is_approver:
            raise AuthorizationError("Access denied")

    def month_summary(self, *, employee_id: str, month: str) -> MonthSummary:
        """Paid/unpaid leave, presence and working-day counts for one month."""
        year, mon = parse_month(month)
        start, end = month_bounds(year, mon)
        holidays = self._holidays.dates_between(start, end)
        days = working_days(start, end, holidays)

        paid = Decimal("0")
        unpaid = Decimal("0")
        for leave in self._leaves.list_leaves(
            employee_id=employee_id,
            status=RequestStatus.APPROVED,
            start=start,
            end=end,
        ):
            overlap = working_days(max(leave.start_date, start), min(leave.end_date, end), holidays)
            if not overlap:
                continue
            count = leave.total_days if leave.is_half_day else Decimal(len(overlap))
            if leave.leave_type.is_paid:
                paid += count
            else:
                unpaid += count

        tally = self._attendance.status_tally(employee_id, start, end)
        weekday_holidays = sum(1 for d in holidays if d.weekday() < 5)
        return MonthSummary(
            paid_leave_days=paid,
            unpaid_leave_days=unpaid,
            present_days=int(tally.get(AttendanceStatus.PRESENT.value, 0)),
            holidays=weekday_holidays,
            total_working_days=len(days),
        )

    def _build_record(self, employee: Employee, month: str, actor: Optional[CurrentUser]) -> PayrollRecord:
        summary = self.month_summary(employee_id=employee.employee_id, month=month)
        breakdown = self._calculator.calculate(
            SalaryInput(
                basic_salary=employee.basic_salary,
                allowances=employee.allowances,
                bonuses=employee.bonuses,
                working_days=summary.total_working_days,
                unpaid_days=summary.unpaid_leave_days,
            )
        )
        paid = actor is not None and actor.role is Role.SUPER_ADMIN
        year, mon = parse_month(month)
        return PayrollRecord(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            month=month,
            breakdown=breakdown,
            summary=summary,
            status=PayrollStatus.PAID if paid else PayrollStatus.PENDING,
            payment_method="Bank Transfer" if self._details.get_bank(employee.employee_id) else "Cash",
            department=employee.department_name,
            designation_name=employee.designation,
            payment_date=date(year, mon, 1),
            created_by=actor.employee_id if actor else None,
        )

    def _check_generatable(self, month: str, *, allow_open_month: bool) -> None:
        current = month_key(self._today())
        if month > current:
            raise ValidationError(f"Payroll cannot be generated for a future month ({month})")
        if month == current and not allow_open_month:
            raise ValidationError(f"Payroll for {month} is not available until the month has ended")

    def ensure_payroll(
        self,
        *,
        employee: Employee,
        month: str,
        actor: Optional[CurrentUser],
        allow_open_month: bool = False,
    ) -> PayrollRecord:
        """Existing row for the month, or a freshly generated one.

        On-demand generation covers closed months only; explicit approver
        generation passes ``allow_open_month`` to include the current month.
        """
        month = _normalize_month(month)
        existing = self._payroll.get(employee_id=employee.employee_id, month=month)
        if existing:
            return existing
        self._check_generatable(month, allow_open_month=allow_open_month)
        if not employee.has_salary:
            raise ValidationError("Employee has no salary data")
        self._payroll.insert(self._build_record(employee, month, actor))
        record = self._payroll.get(employee_id=employee.employee_id, month=month)
        if not record:
            raise NotFoundError("Payroll not found")
        logger.info("payroll %s/%s generated", employee.employee_id, month)
        return record

    def generate_for_employee(self, *, actor: CurrentUser, employee_id: str, month: str) -> PayrollRecord:
        self._require_approver(actor)
        month = _normalize_month(month)
        employee = self._employees.get_by_employee_id(require_non_empty(employee_id, "employee_id"))
        if not employee:
            raise NotFoundError("Employee not found")
        if self._payroll.get(employee_id=employee.employee_id, month=month):
            raise ValidationError(f"Payroll already exists for {employee.employee_id} in {month}")
        return self.ensure_payroll(employee=employee, month=month, actor=actor, allow_open_month=True)

    def generate_for_month(self, *, actor: Optional[CurrentUser], month: str) -> GenerationReport:
        """Generate missing rows for every active employee; ``actor`` None means a scheduled run."""
        if actor is not None:
            self._require_approver(actor)
        month = _normalize_month(month)
        self._check_generatable(month, allow_open_month=True)
        created, existing, no_salary = [], [], []
        for employee in self._employees.list_active():
            if self._payroll.get(employee_id=employee.employee_id, month=month):
                existing.append(employee.employee_id)
                continue
            if not employee.has_salary:
                no_salary.append(employee.employee_id)
                continue
            if self._payroll.insert(self._build_record(employee, month, actor)):
                created.append(employee.employee_id)
            else:
                existing.append(employee.employee_id)
        logger.info(
            "payroll %s: created=%d existing=%d no_salary=%d",
            month,
            len(created),
            len(existing),
            len(no_salary),
        )
        return GenerationReport(
            month=month,
            created=tuple(created),
            skipped_existing=tuple(existing),
            skipped_no_salary=tuple(no_salary),
        )

    def create_manual(self, *, actor: CurrentUser, payload: Mapping[str, Any]) -> PayrollRecord:
        self._require_approver(actor)
        month = _normalize_month(payload.get("month"))
        employee = self._employees.get_by_employee_id(require_non_empty(payload.get("employee_id"), "employee_id"))
        if not employee:
            raise NotFoundError("Employee not found")
        if self._payroll.get(employee_id=employee.employee_id, month=month):
            raise ValidationError(f"Payroll already exists for {employee.employee_id} in {month}")

        amounts = {
            name: money(parse_money(payload.get(name, 0), name))
            for name in PayrollBreakdown.__dataclass_fields__
            if name not in ("gross_salary", "net_salary")
        }
        earnings = (
            amounts["basic_salary"] + amounts["hra"] + amounts["da"] + amounts["other_allowances"] + amounts["bonuses"]
        )
        gross = money(parse_money(payload.get("gross_salary", earnings), "gross_salary"))
        if abs(gross - earnings) > TOLERANCE:
            raise ValidationError("gross_salary does not match the sum of earnings")
        net = money(parse_money(payload.get("net_salary"), "net_salary"))
        breakdown = PayrollBreakdown(gross_salary=gross, net_salary=net, **amounts)
        if abs(gross - breakdown.total_deductions - net) > TOLERANCE:
            raise ValidationError("net_salary does not match gross_salary minus deductions")

        year, mon = parse_month(month)
        record = PayrollRecord(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            month=month,
            breakdown=breakdown,
            summary=self.month_summary(employee_id=employee.employee_id, month=month),
            status=PayrollStatus.PAID if actor.role is Role.SUPER_ADMIN else PayrollStatus.PENDING,
            payment_method="Bank Transfer" if self._details.get_bank(employee.employee_id) else "Cash",
            department=employee.department_name,
            designation_name=employee.designation,
            payment_date=date(year, mon, 1),
            created_by=actor.employee_id,
        )
        if not self._payroll.insert(record):
            raise ValidationError(f"Payroll already exists for {employee.employee_id} in {month}")
        logger.info("manual payroll %s/%s created by %s", employee.employee_id, month, actor.employee_id)
        return self._payroll.get(employee_id=employee.employee_id, month=month) or record

    def list_payroll(
        self,
        *,
        actor: CurrentUser,
        month: Optional[str] = None,
        employee_id: Optional[str] = None,
        page: Any = 1,
        limit: Any = DEFAULT_PAGE_SIZE,
    ) -> Tuple[Sequence[PayrollRecord], int, int, int]:
        if not actor.is_approver:
            employee_id = actor.employee_id
        page_i, limit_i = page_params(page, limit, default_limit=DEFAULT_PAGE_SIZE, max_limit=MAX_PAGE_SIZE)
        rows, total = self._payroll.list_records(
            month=_normalize_month(month) if month else None,
            employee_id=employee_id or None,
            page=page_i,
            limit=limit_i,
        )
        return rows, total, page_i, limit_i

    def report_pdf(
        self,
        *,
        actor: CurrentUser,
        company: Company,
        month: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> bytes:
        self._require_approver(actor)
        month = _normalize_month(month or month_key(self._today()))
        rows = self._payroll.list_for_month(month)
        if employee_id:
            rows = [r for r in rows if r.employee_id == employee_id]
        if not rows:
            raise NotFoundError(f"No payroll records for {month}")
        return render_payroll_report(company=company, month=month, records=rows)
