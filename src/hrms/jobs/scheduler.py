from __future__ import annotations

from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..common.logging import get_logger
from ..core.enums import JobStatus
from .service import JobService

logger = get_logger(__name__)

RUN_DUE_JOB_ID = "hrms-run-due"


def run_due_now(job_service: JobService, scheduler: BackgroundScheduler) -> None:
    """One scheduled tick: run whatever is due on the scheduler's calendar day."""
    today = datetime.now(scheduler.timezone).date()
    for result in job_service.run_due(today):
        if result.status is JobStatus.FAILED:
            logger.error("scheduled %s [%s] failed: %s", result.job_name, result.period_key, result.detail)
        else:
            logger.info("scheduled %s [%s] ran=%s %s", result.job_name, result.period_key, result.ran, result.detail)


def build_scheduler(job_service: JobService, *, timezone: str, hour: int = 0, minute: int = 0) -> BackgroundScheduler:
    """Daily wall-clock trigger for ``run_due``; the job ledger keeps reruns harmless."""
    scheduler = BackgroundScheduler(timezone=timezone)
    scheduler.add_job(
        run_due_now,
        CronTrigger(hour=hour, minute=minute, timezone=timezone),
        args=[job_service, scheduler],
        id=RUN_DUE_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
        misfire_grace_time=3600,
    )
    return scheduler


def start_scheduler(job_service: JobService, *, timezone: str, hour: int = 0, minute: int = 0) -> BackgroundScheduler:
    scheduler = build_scheduler(job_service, timezone=timezone, hour=hour, minute=minute)
    scheduler.start()
    logger.info("scheduler started: run-due daily at %02d:%02d %s", hour, minute, timezone)
    return scheduler
