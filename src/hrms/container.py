from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .auth.tokens import TokenCodec
from .cards.service import CardService
from .common.uploads import UploadStore
from .core.constants import DEFAULT_AUDIT_RETENTION_DAYS, DEFAULT_TOKEN_HOURS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.details_service import EmployeeDetailsService
from .employees.mysql_details_repository import MySQLEmployeeDetailsRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeDetailsRepository, EmployeeRepository
from .employees.service import EmployeeService
from .jobs.mysql_job_repository import MySQLJobRepository
from .jobs.repository import JobRepository
from .jobs.service import JobService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .organization.mysql_company_repository import MySQLCompanyRepository
from .organization.mysql_department_repository import MySQLDepartmentRepository
from .organization.mysql_holiday_repository import MySQLHolidayRepository
from .organization.repository import CompanyRepository, DepartmentRepository, HolidayRepository
from .organization.service import CompanyService, DepartmentService, HolidayService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .payslips.service import PayslipService
from .performance.mysql_performance_repository import MySQLPerformanceRepository
from .performance.repository import PerformanceRepository
from .performance.service import PerformanceService
from .travel_expenses.mysql_travel_expense_repository import MySQLTravelExpenseRepository
from .travel_expenses.repository import TravelExpenseRepository
from .travel_expenses.service import TravelExpenseService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    tokens: TokenCodec
    uploads: UploadStore

    employees_repo: EmployeeRepository
    details_repo: EmployeeDetailsRepository
    departments_repo: DepartmentRepository
    holidays_repo: HolidayRepository
    company_repo: CompanyRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    expenses_repo: TravelExpenseRepository
    performance_repo: PerformanceRepository
    jobs_repo: JobRepository

    auth_service: AuthService
    employee_service: EmployeeService
    details_service: EmployeeDetailsService
    department_service: DepartmentService
    holiday_service: HolidayService
    company_service: CompanyService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    payslip_service: PayslipService
    travel_expense_service: TravelExpenseService
    performance_service: PerformanceService
    card_service: CardService
    dashboard_service: DashboardService
    job_service: JobService


def assemble_container(
    *,
    conn: Optional[DatabaseConnection],
    tokens: TokenCodec,
    uploads: UploadStore,
    employees_repo: EmployeeRepository,
    details_repo: EmployeeDetailsRepository,
    departments_repo: DepartmentRepository,
    holidays_repo: HolidayRepository,
    company_repo: CompanyRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    expenses_repo: TravelExpenseRepository,
    performance_repo: PerformanceRepository,
    jobs_repo: JobRepository,
    company: Optional[dict] = None,
    retention_days: int = DEFAULT_AUDIT_RETENTION_DAYS,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, fakes in tests)."""
    company_service = CompanyService(company_repo, fallback=dict(company or {}))
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        details_repo,
        leaves_repo,
        attendance_repo,
        holidays_repo,
    )

    return Container(
        conn=conn,
        tokens=tokens,
        uploads=uploads,
        employees_repo=employees_repo,
        details_repo=details_repo,
        departments_repo=departments_repo,
        holidays_repo=holidays_repo,
        company_repo=company_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        expenses_repo=expenses_repo,
        performance_repo=performance_repo,
        jobs_repo=jobs_repo,
        auth_service=AuthService(employees_repo, tokens),
        employee_service=EmployeeService(employees_repo, departments_repo),
        details_service=EmployeeDetailsService(employees_repo, details_repo, uploads),
        department_service=DepartmentService(departments_repo),
        holiday_service=HolidayService(holidays_repo),
        company_service=company_service,
        attendance_service=AttendanceService(attendance_repo),
        leave_service=LeaveService(leaves_repo, holidays_repo),
        payroll_service=payroll_service,
        payslip_service=PayslipService(payroll_service, employees_repo, company_service),
        travel_expense_service=TravelExpenseService(expenses_repo, employees_repo, uploads),
        performance_service=PerformanceService(performance_repo, employees_repo),
        card_service=CardService(employees_repo, details_repo, company_service),
        dashboard_service=DashboardService(employees_repo, leaves_repo, attendance_repo, expenses_repo),
        job_service=JobService(jobs_repo, payroll_service, retention_days=retention_days),
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tokens = TokenCodec(
        getattr(settings, "JWT_SECRET", ""),
        expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", DEFAULT_TOKEN_HOURS)),
    )
    uploads = UploadStore(
        getattr(settings, "UPLOAD_DIR", "uploads"),
        max_bytes=int(getattr(settings, "MAX_UPLOAD_MB", 5)) * 1024 * 1024,
    )

    return assemble_container(
        conn=conn,
        tokens=tokens,
        uploads=uploads,
        employees_repo=MySQLEmployeeRepository(conn),
        details_repo=MySQLEmployeeDetailsRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        company_repo=MySQLCompanyRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        expenses_repo=MySQLTravelExpenseRepository(conn),
        performance_repo=MySQLPerformanceRepository(conn),
        jobs_repo=MySQLJobRepository(conn),
        company=getattr(settings, "COMPANY", None),
        retention_days=int(getattr(settings, "AUDIT_RETENTION_DAYS", DEFAULT_AUDIT_RETENTION_DAYS)),
    )
