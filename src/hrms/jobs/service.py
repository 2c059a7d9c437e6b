from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional

from ..auth.model import CurrentUser
from ..common.datetime_utils import month_key, parse_month, previous_month, today_local
from ..common.logging import get_logger
from ..core.constants import (
    DEFAULT_AUDIT_RETENTION_DAYS,
    JOB_LOG_CLEANUP,
    JOB_MONTHLY_LEAVE_ALLOCATION,
    JOB_PAYROLL_AGGREGATION,
    MONTHLY_LEAVE_ALLOCATION,
)
from ..core.enums import JobStatus, Role
from ..core.exceptions import AuthorizationError
from ..payroll.service import PayrollService
from .model import JobResult
from .repository import JobRepository

logger = get_logger(__name__)


def _period(value: Optional[str], default: date) -> str:
    if not value:
        return month_key(default)
    year, mon = parse_month(value)
    return f"{year:04d}-{mon:02d}"


class JobService:
    """Recurring jobs guarded by the job_runs ledger."""

    def __init__(
        self,
        jobs: JobRepository,
        payroll: PayrollService,
        *,
        retention_days: int = DEFAULT_AUDIT_RETENTION_DAYS,
        today: Callable[[], date] = today_local,
    ):
        self._jobs = jobs
        self._payroll = payroll
        self._retention_days = int(retention_days)
        self._today = today

    def _fail(self, job_name: str, period_key: str, exc: Exception) -> None:
        logger.exception("job %s for %s failed", job_name, period_key)
        self._jobs.record_run(job_name=job_name, period_key=period_key, status=JobStatus.FAILED, detail=str(exc))

    def allocate_monthly_leaves(self, period: Optional[str] = None) -> JobResult:
        period_key = _period(period, self._today())
        year = int(period_key[:4])
        try:
            credited = self._jobs.allocate_monthly(
                job_name=JOB_MONTHLY_LEAVE_ALLOCATION,
                period_key=period_key,
                year=year,
                allocation=MONTHLY_LEAVE_ALLOCATION,
            )
        except Exception as exc:
            self._fail(JOB_MONTHLY_LEAVE_ALLOCATION, period_key, exc)
            raise
        if credited is None:
            logger.info("leave allocation for %s already done, skipping", period_key)
            return JobResult(JOB_MONTHLY_LEAVE_ALLOCATION, period_key, ran=False, detail="already allocated")
        logger.info("leave allocation for %s credited %d employee(s)", period_key, credited)
        return JobResult(JOB_MONTHLY_LEAVE_ALLOCATION, period_key, ran=True, detail=f"credited {credited} employee(s)")

    def trigger_allocation(self, *, actor: CurrentUser, period: Optional[str] = None) -> JobResult:
        if actor.role is not Role.SUPER_ADMIN:
            raise AuthorizationError("Only super admin can trigger leave allocation")
        logger.info("leave allocation triggered manually by %s", actor.employee_id)
        return self.allocate_monthly_leaves(period)

    def aggregate_payroll(self, period: Optional[str] = None) -> JobResult:
        period_key = _period(period, previous_month(self._today()))
        if self._jobs.has_run(job_name=JOB_PAYROLL_AGGREGATION, period_key=period_key):
            return JobResult(JOB_PAYROLL_AGGREGATION, period_key, ran=False, detail="already aggregated")
        try:
            report = self._payroll.generate_for_month(actor=None, month=period_key)
        except Exception as exc:
            self._fail(JOB_PAYROLL_AGGREGATION, period_key, exc)
            raise
        detail = (
            f"created={len(report.created)} existing={len(report.skipped_existing)} "
            f"no_salary={len(report.skipped_no_salary)}"
        )
        self._jobs.record_run(
            job_name=JOB_PAYROLL_AGGREGATION, period_key=period_key, status=JobStatus.COMPLETED, detail=detail
        )
        return JobResult(JOB_PAYROLL_AGGREGATION, period_key, ran=True, detail=detail)

    def cleanup_logs(self, today: Optional[date] = None) -> JobResult:
        day = today or self._today()
        period_key = day.isoformat()
        if self._jobs.has_run(job_name=JOB_LOG_CLEANUP, period_key=period_key):
            return JobResult(JOB_LOG_CLEANUP, period_key, ran=False, detail="already cleaned")
        cutoff = datetime.combine(day - timedelta(days=self._retention_days), time.min)
        try:
            deleted = self._jobs.delete_audit_before(cutoff)
        except Exception as exc:
            self._fail(JOB_LOG_CLEANUP, period_key, exc)
            raise
        detail = f"deleted {deleted} audit row(s) before {cutoff.date().isoformat()}"
        self._jobs.record_run(job_name=JOB_LOG_CLEANUP, period_key=period_key, status=JobStatus.COMPLETED, detail=detail)
        logger.info("log cleanup: %s", detail)
        return JobResult(JOB_LOG_CLEANUP, period_key, ran=True, detail=detail)

    def run_due(self, today: Optional[date] = None) -> List[JobResult]:
        """Run whatever is due on ``today``; a failing job does not stop the others."""
        day = today or self._today()
        steps = []
        if day.day == 1:
            steps.append((JOB_MONTHLY_LEAVE_ALLOCATION, month_key(day), lambda: self.allocate_monthly_leaves(month_key(day))))
            last = month_key(previous_month(day))
            steps.append((JOB_PAYROLL_AGGREGATION, last, lambda: self.aggregate_payroll(last)))
        steps.append((JOB_LOG_CLEANUP, day.isoformat(), lambda: self.cleanup_logs(day)))

        results = []
        for job_name, period_key, run in steps:
            try:
                results.append(run())
            except Exception as exc:
                results.append(JobResult(job_name, period_key, ran=True, status=JobStatus.FAILED, detail=str(exc)))
        return results
