from __future__ import annotations

from datetime import date

import click
from flask import current_app
from flask.cli import AppGroup

from ..core.enums import JobStatus

jobs_cli = AppGroup("jobs", help="Recurring HR jobs (run from cron).")


def _service():
    return current_app.extensions["hrms"].job_service


def _echo(result) -> None:
    click.echo(f"{result.job_name} [{result.period_key}] {result.status.value} ran={result.ran} {result.detail}")


@jobs_cli.command("run-due")
@click.option("--date", "day", default=None, help="Run as if today were YYYY-MM-DD.")
def run_due(day):
    failed = False
    for result in _service().run_due(date.fromisoformat(day) if day else None):
        _echo(result)
        failed = failed or result.status is JobStatus.FAILED
    if failed:
        raise SystemExit(1)


@jobs_cli.command("allocate-leaves")
@click.argument("period", required=False)
def allocate_leaves(period):
    _echo(_service().allocate_monthly_leaves(period))


@jobs_cli.command("aggregate-payroll")
@click.argument("period", required=False)
def aggregate_payroll(period):
    _echo(_service().aggregate_payroll(period))


@jobs_cli.command("cleanup-logs")
def cleanup_logs():
    _echo(_service().cleanup_logs())
