"""Sweep runner.

Invoked by an external timer (cron HTTP endpoint or ``ideagen sweep``).
One sweep:

    1. drops expired per-user leases
    2. queries every due schedule (active, unpaused, next_trigger <= now)
    3. runs the orchestrator for each user, one at a time; each run
       re-reads its schedule under the lease and skips it if no longer due
    4. returns processed / errors / skipped counts

A failure for one user is logged and counted; the remaining users are
still attempted.  Only a failing due-schedule query aborts the sweep.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ideagen.core.logging import get_logger
from ideagen.scheduling.clock import Clock, system_clock
from ideagen.scheduling.lock_manager import LockManager
from ideagen.scheduling.orchestrator import GenerationOrchestrator
from ideagen.scheduling.repository import ScheduleRepository

logger = get_logger(__name__)


@dataclass
class SweepResult:
    """Aggregate counts for one sweep."""

    processed: int = 0
    errors: int = 0
    skipped: int = 0
    due: int = 0
    started_at: datetime | None = None
    finished_at: datetime | None = None
    failures: list[dict[str, Any]] = field(default_factory=list)

    @property
    def duration_ms(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "processed": self.processed,
            "errors": self.errors,
            "skipped": self.skipped,
            "due": self.due,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
            "failures": self.failures,
        }


class SweepRunner:
    """Processes every due schedule once.

    Example:
        >>> runner = SweepRunner(repository, orchestrator, lock_manager)
        >>> result = await runner.sweep()
        >>> result.processed, result.errors
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        orchestrator: GenerationOrchestrator,
        lock_manager: LockManager | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.repository = repository
        self.orchestrator = orchestrator
        self.lock_manager = lock_manager
        self.clock = clock

    async def sweep(self) -> SweepResult:
        """Run one sweep.

        Raises:
            PersistenceError: the due-schedule query failed
        """
        result = SweepResult(started_at=self.clock())

        if self.lock_manager is not None:
            try:
                self.lock_manager.cleanup_expired_locks()
            except sqlite3.Error as e:
                logger.warning("lock_cleanup_failed", error=str(e))

        due = self.repository.query_due(result.started_at)
        result.due = len(due)
        if due:
            logger.info("sweep_started", due=len(due))
        else:
            logger.debug("sweep_nothing_due")

        for record in due:
            try:
                outcome = await self.orchestrator.run_for_user(record.user_id, due_only=True)
            except Exception as e:
                result.errors += 1
                result.failures.append({"user_id": record.user_id, "error": str(e)})
                logger.exception("sweep_user_failed", user_id=record.user_id)
                continue

            if outcome.success:
                result.processed += 1
            elif outcome.skipped:
                result.skipped += 1
            else:
                result.errors += 1
                result.failures.append({"user_id": record.user_id, "error": outcome.error})

        result.finished_at = self.clock()
        logger.info(
            "sweep_completed",
            processed=result.processed,
            errors=result.errors,
            skipped=result.skipped,
            duration_ms=result.duration_ms,
        )
        return result
