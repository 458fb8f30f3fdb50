"""Generation orchestrator.

Runs one generation attempt for one user and moves the schedule to its
next state.  Manual (UI/CLI) triggers and the sweep share this entry
point, so both honour ``enabled`` and ``paused`` the same way.

┌──────────────────────────────────────────────────────────────────────┐
│  run_for_user(user_id)                                               │
│                                                                      │
│   acquire per-user lease ── held ───────────► RunOutcome LOCKED      │
│          │                                                           │
│   load active schedule ── none / disabled ──► RunOutcome NOT_ENABLED │
│          │                                                           │
│          ├── paused ────────────────────────► RunOutcome PAUSED      │
│          ├── sweep only: not due ───────────► RunOutcome NOT_DUE     │
│          │                                                           │
│   IDLE ──► GENERATING ── generator.generate(user_id)                 │
│                 │                                                    │
│       ok ───────┴──────── failed / raised                            │
│        │                         │                                   │
│   SUCCEEDED                   FAILED                                 │
│   policy.on_success           policy.on_failure                      │
│        │                         │                                   │
│        └──── persist (CAS) ──────┘   PersistenceError propagates     │
│                     │                                                │
│              notifier.notify(event)  failures logged, never raised   │
│                     │                                                │
│              release lease (by token)                                │
└──────────────────────────────────────────────────────────────────────┘

The schedule is read only after the lease is held, so a run that queued
behind another one sees that run's result rather than a stale row.

Settings changes (``configure``, ``disable``, ``set_paused``) also live
here, so every write to a schedule goes through one component.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ideagen.core.errors import (
    ConcurrencyConflictError,
    NotEnabledError,
    PausedError,
    error_message,
)
from ideagen.core.logging import LogContext, get_logger
from ideagen.notifications.events import NotificationEvent, success_event
from ideagen.scheduling.clock import Clock, local_components, system_clock
from ideagen.scheduling.intervals import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEZONE,
    interval_spec_from_settings,
    parse_day_of_week,
    validate_interval_settings,
)
from ideagen.scheduling.lock_manager import LockManager
from ideagen.scheduling.models import (
    AutoGenerationStatus,
    ScheduleCreate,
    ScheduleRecord,
    ScheduleUpdate,
)
from ideagen.scheduling.protocol import GenerationResult, Notifier, TradeIdeaGenerator
from ideagen.scheduling.repository import ScheduleRepository
from ideagen.scheduling.retry import FailureDecision, RetryPolicy
from ideagen.scheduling.triggers import compute_next_trigger

logger = get_logger(__name__)


class AttemptState(str, Enum):
    """Per-attempt state machine; SUCCEEDED and FAILED are terminal."""

    IDLE = "IDLE"
    GENERATING = "GENERATING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class OutcomeCode(str, Enum):
    NOT_ENABLED = "NOT_ENABLED"
    PAUSED = "PAUSED"
    NOT_DUE = "NOT_DUE"
    LOCKED = "LOCKED"
    GENERATION_FAILED = "GENERATION_FAILED"


_SKIP_CODES = frozenset(
    {OutcomeCode.NOT_ENABLED, OutcomeCode.PAUSED, OutcomeCode.NOT_DUE, OutcomeCode.LOCKED}
)

Decision = ScheduleUpdate | FailureDecision


def _update_of(decision: Decision) -> ScheduleUpdate:
    return decision.update if isinstance(decision, FailureDecision) else decision


@dataclass
class RunOutcome:
    """Result of ``run_for_user``; always returned, never raised."""

    user_id: str
    success: bool
    state: AttemptState = AttemptState.IDLE
    error: str | None = None
    code: OutcomeCode | None = None
    next_trigger: datetime | None = None
    retry_count: int = 0
    will_retry: bool = False
    idea: dict[str, Any] = field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        """True when no attempt was made (not enabled, paused, not due or leased elsewhere)."""
        return self.code in _SKIP_CODES

    @classmethod
    def skip(cls, user_id: str, code: OutcomeCode, error: str) -> RunOutcome:
        return cls(user_id=user_id, success=False, error=error, code=code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "success": self.success,
            "state": self.state.value,
            "error": self.error,
            "code": self.code.value if self.code else None,
            "next_trigger": self.next_trigger.isoformat() if self.next_trigger else None,
            "retry_count": self.retry_count,
            "will_retry": self.will_retry,
        }


class GenerationOrchestrator:
    """Runs generation attempts and owns every write to a schedule.

    Example:
        >>> orchestrator = GenerationOrchestrator(
        ...     repository=ScheduleRepository(conn),
        ...     generator=HttpTradeIdeaGenerator("https://ideas.internal/generate"),
        ...     notifier=dispatcher,
        ...     lock_manager=LockManager(conn),
        ... )
        >>> outcome = await orchestrator.run_for_user("u-1")
        >>> outcome.success, outcome.code
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        generator: TradeIdeaGenerator,
        notifier: Notifier | None = None,
        retry_policy: RetryPolicy | None = None,
        lock_manager: LockManager | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.repository = repository
        self.generator = generator
        self.notifier = notifier
        self.retry_policy = retry_policy or RetryPolicy()
        self.lock_manager = lock_manager
        self.clock = clock

    # === Generation ===

    async def run_for_user(self, user_id: str, *, due_only: bool = False) -> RunOutcome:
        """Run one attempt for ``user_id``.

        Args:
            user_id: Owner of the schedule
            due_only: Skip with NOT_DUE unless the schedule is due now (sweep)

        Raises:
            PersistenceError: the schedule could not be loaded or saved
        """
        async with LogContext(user_id=user_id):
            token = None
            if self.lock_manager is not None:
                token = self.lock_manager.acquire(user_id)
                if token is None:
                    logger.info("generation_skipped", reason=OutcomeCode.LOCKED.value)
                    return RunOutcome.skip(
                        user_id, OutcomeCode.LOCKED, "Another generation is already running"
                    )

            try:
                record = self.repository.get_active(user_id)
                skipped = self._check_runnable(user_id, record, due_only)
                if skipped is not None:
                    return skipped
                return await self._attempt(record)
            finally:
                if token is not None:
                    self.lock_manager.release(user_id, token)

    def _check_runnable(
        self, user_id: str, record: ScheduleRecord | None, due_only: bool
    ) -> RunOutcome | None:
        if record is None or not record.enabled:
            error = NotEnabledError(user_id)
            logger.info("generation_skipped", reason=error.code)
            return RunOutcome.skip(user_id, OutcomeCode.NOT_ENABLED, error.message)

        if record.paused:
            error = PausedError(user_id)
            logger.info("generation_skipped", reason=error.code)
            return RunOutcome.skip(user_id, OutcomeCode.PAUSED, error.message)

        if due_only and not record.is_due(self.clock()):
            logger.info("generation_skipped", reason=OutcomeCode.NOT_DUE.value)
            return RunOutcome.skip(user_id, OutcomeCode.NOT_DUE, "Schedule is not due yet")

        return None

    async def _attempt(self, record: ScheduleRecord) -> RunOutcome:
        logger.info("generation_started", schedule_id=record.id, retry_count=record.retry_count)
        result = await self._generate(record.user_id)
        now = self.clock()

        if result.success:
            stored, _ = self._persist(
                record, lambda current: self.retry_policy.on_success(current, now)
            )
            logger.info(
                "generation_succeeded",
                next_trigger=stored.next_trigger.isoformat() if stored.next_trigger else None,
            )
            await self._notify(lambda: success_event(record.user_id, result.idea), stored)
            return RunOutcome(
                user_id=record.user_id,
                success=True,
                state=AttemptState.SUCCEEDED,
                next_trigger=stored.next_trigger,
                retry_count=stored.retry_count,
                idea=result.idea,
            )

        message = result.error or "Unknown error"
        stored, decision = self._persist(
            record, lambda current: self.retry_policy.on_failure(current, message, now)
        )
        logger.warning(
            "generation_failed",
            error=message,
            will_retry=decision.will_retry,
            retry_count=stored.retry_count,
            next_trigger=stored.next_trigger.isoformat() if stored.next_trigger else None,
        )
        await self._notify(lambda: decision.event, stored)
        return RunOutcome(
            user_id=record.user_id,
            success=False,
            state=AttemptState.FAILED,
            error=message,
            code=OutcomeCode.GENERATION_FAILED,
            next_trigger=stored.next_trigger,
            retry_count=stored.retry_count,
            will_retry=decision.will_retry,
        )

    async def _generate(self, user_id: str) -> GenerationResult:
        # Generator exceptions become an ordinary failed result
        try:
            result = await self.generator.generate(user_id)
        except Exception as e:
            logger.warning("generator_raised", error=str(e), error_type=type(e).__name__)
            return GenerationResult.fail(error_message(e))
        if result is None:
            return GenerationResult.fail("Generator returned no result")
        return result

    def _persist(
        self, record: ScheduleRecord, decide: Callable[[ScheduleRecord], Decision]
    ) -> tuple[ScheduleRecord, Decision]:
        """Write the post-attempt fields with one reload on a version conflict.

        ``decide`` maps a schedule to the policy's decision for it.  After a
        conflict it is called again on the reloaded row, so retry counts and
        next triggers follow the latest state instead of the one read before
        generation.  Only attempt-owned columns are written, so a concurrent
        pause or settings change is kept.

        Returns:
            The stored record and the decision that was written
        """
        decision = decide(record)
        try:
            return self.repository.apply_update(record, _update_of(decision)), decision
        except ConcurrencyConflictError:
            fresh = self.repository.get(record.id)
            if fresh is None:
                raise
            logger.warning("schedule_changed_during_generation", schedule_id=record.id)
            decision = decide(fresh)
            return self.repository.apply_update(fresh, _update_of(decision)), decision

    async def _notify(
        self, make_event: Callable[[], NotificationEvent], record: ScheduleRecord
    ) -> None:
        if self.notifier is None:
            return
        # Building the event is part of delivery: a malformed idea must not fail the run
        try:
            event = make_event()
            if event.email is None:
                event.email = record.notification_email
            await self.notifier.notify(event)
        except Exception as e:
            logger.warning("notification_failed", error=str(e), error_type=type(e).__name__)

    # === Settings ===

    def configure(
        self,
        user_id: str,
        *,
        enabled: bool = True,
        interval: str = DEFAULT_INTERVAL,
        time: str | None = None,
        timezone: str = DEFAULT_TIMEZONE,
        day_of_week: int | str | None = None,
        paused: bool = False,
        notification_email: str | None = None,
    ) -> ScheduleRecord | None:
        """Apply a settings update.

        Enabling replaces the user's active schedule with a new one whose
        first trigger is computed now.  Disabling retires every schedule
        of the user and returns ``None``.

        Raises:
            InvalidScheduleConfigError: bad interval, time, timezone or weekday
        """
        if not enabled:
            self.disable(user_id)
            return None

        validate_interval_settings(interval, time, timezone, day_of_week)
        weekday = parse_day_of_week(day_of_week)
        now = self.clock()

        spec = interval_spec_from_settings(interval, time, timezone, weekday)
        first_trigger = compute_next_trigger(spec, now)
        if interval == "weekly" and weekday is None:
            # Pin the weekday once instead of re-deriving it on every recompute
            weekday = local_components(first_trigger, timezone).weekday

        return self.repository.replace_active(
            ScheduleCreate(
                user_id=user_id,
                interval_type=interval,
                next_trigger=first_trigger,
                scheduled_time=time or None,
                timezone=timezone,
                day_of_week=weekday,
                notification_email=notification_email,
                paused=paused,
            )
        )

    def disable(self, user_id: str) -> int:
        count = self.repository.deactivate_user(user_id)
        logger.info("auto_generation_disabled", user_id=user_id, schedules=count)
        return count

    def set_paused(self, user_id: str, paused: bool) -> ScheduleRecord:
        """Pause or resume the active schedule; ``next_trigger`` is kept.

        Raises:
            NotEnabledError: the user has no active schedule
        """
        record = self.repository.get_active(user_id)
        if record is None:
            raise NotEnabledError(user_id)
        if record.paused == paused:
            return record
        stored = self.repository.apply_update(record, ScheduleUpdate(paused=paused))
        logger.info("auto_generation_paused" if paused else "auto_generation_resumed", user_id=user_id)
        return stored

    def get_status(self, user_id: str) -> AutoGenerationStatus:
        """Dashboard view derived from the active schedule."""
        return AutoGenerationStatus.from_record(self.repository.get_active(user_id), self.clock())
