from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional, Protocol

from ..core.enums import JobStatus, LeaveType


class JobRepository(Protocol):
    def has_run(self, *, job_name: str, period_key: str) -> bool:
        """True when a COMPLETED ledger row exists."""

        raise NotImplementedError

    def record_run(self, *, job_name: str, period_key: str, status: JobStatus, detail: str = "") -> None:
        """Upsert the ledger row; a COMPLETED row is never downgraded."""

        raise NotImplementedError

    def allocate_monthly(
        self,
        *,
        job_name: str,
        period_key: str,
        year: int,
        allocation: Mapping[LeaveType, Decimal],
    ) -> Optional[int]:
        """Credit every active employee and complete the ledger row atomically.

        Returns the number of employees credited, or None when the period was
        already allocated.
        """

        raise NotImplementedError

    def delete_audit_before(self, cutoff: datetime) -> int:
        raise NotImplementedError
