"""
Maintenance Sweeper

Opportunistic housekeeping run after a successful login: drops expired
sessions everywhere and ages out one business's audit log. Runs detached
from the request with its own unit of work and never reports failure to
the caller.
"""

import asyncio
import calendar
import logging
from datetime import datetime
from typing import Callable, Set
from uuid import UUID

from tillflow.app.services.unit_of_work import UnitOfWork
from tillflow.domain.base import utcnow

logger = logging.getLogger(__name__)


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier, day clamped to month end"""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class MaintenanceSweeper:
    """
    Business Rules:
    - Expired sessions are deleted globally, not per business
    - Audit entries older than retention_months are deleted for the given
      business only
    - Both deletions are idempotent, so overlapping sweeps are harmless
    - Each deletion commits on its own; a failure in one does not undo the other
    - Any failure is logged and swallowed; there is no retry
    - A scheduled sweep is bounded by timeout_seconds
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        retention_months: int = 6,
        timeout_seconds: float = 10.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow_factory = uow_factory
        self.retention_months = retention_months
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        # Strong references so pending sweeps are not garbage collected
        self._tasks: Set[asyncio.Task] = set()

    async def cleanup_stale_data(self, business_id: UUID) -> None:
        now = self.clock()

        try:
            async with self.uow_factory() as uow:
                sessions_deleted = await uow.sessions.delete_expired(now)
                await uow.commit()
            logger.info(f"Maintenance sweep: {sessions_deleted} expired session(s) deleted")
        except Exception:
            # Non-fatal: login already succeeded
            logger.exception(
                f"Maintenance sweep failed deleting expired sessions for business {business_id}"
            )

        cutoff = months_before(now, self.retention_months)
        try:
            async with self.uow_factory() as uow:
                audit_deleted = await uow.audit_logs.delete_older_than(business_id, cutoff)
                await uow.commit()
            logger.info(
                f"Maintenance sweep for business {business_id}: "
                f"{audit_deleted} audit log entries before {cutoff.date().isoformat()}"
            )
        except Exception:
            logger.exception(
                f"Maintenance sweep failed ageing out audit log for business {business_id}"
            )

    async def _run_bounded(self, business_id: UUID) -> None:
        try:
            await asyncio.wait_for(
                self.cleanup_stale_data(business_id), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Maintenance sweep for business {business_id} timed out "
                f"after {self.timeout_seconds}s"
            )

    def schedule(self, business_id: UUID) -> asyncio.Task:
        """Start a sweep without waiting for it. Must be called inside a running loop."""
        task = asyncio.create_task(self._run_bounded(business_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for in-flight sweeps; used on shutdown"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
