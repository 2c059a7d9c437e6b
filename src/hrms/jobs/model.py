from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import JobStatus


@dataclass(frozen=True)
class JobResult:
    """Outcome of one attempt; ``ran`` is False when the ledger already had the period."""

    job_name: str
    period_key: str
    ran: bool
    status: JobStatus = JobStatus.COMPLETED
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "job_name": self.job_name,
            "period_key": self.period_key,
            "ran": self.ran,
            "status": self.status.value,
            "detail": self.detail,
        }
