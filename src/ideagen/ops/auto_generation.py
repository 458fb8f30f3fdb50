"""
Auto-generation operations.

User-facing operations over a user's schedule: read the status view,
change settings, pause/resume, trigger a run now, and run one sweep.
Every function returns an :class:`OperationResult`; typed errors become
failed results with their code and category.
"""

from __future__ import annotations

from ideagen.core.errors import ConfigError, IdeagenError, PersistenceError
from ideagen.core.logging import get_logger
from ideagen.ops.context import OperationContext
from ideagen.ops.requests import SetPausedRequest, UpdateAutoGenerationRequest
from ideagen.ops.result import OperationResult, start_timer
from ideagen.scheduling.models import AutoGenerationStatus
from ideagen.scheduling.orchestrator import RunOutcome
from ideagen.scheduling.sweep import SweepResult

logger = get_logger(__name__)


def _require_user(user_id: str, elapsed_ms: float) -> OperationResult | None:
    if not user_id:
        return OperationResult.fail(
            "VALIDATION_FAILED", "user_id is required", elapsed_ms=elapsed_ms
        )
    return None


def get_auto_generation_status(
    ctx: OperationContext, user_id: str
) -> OperationResult[AutoGenerationStatus]:
    """Derived dashboard view of the user's schedule."""
    timer = start_timer()
    if (invalid := _require_user(user_id, timer.elapsed_ms)) is not None:
        return invalid

    try:
        status = ctx.get_scheduler().get_status(user_id)
    except IdeagenError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(status, elapsed_ms=timer.elapsed_ms)


def update_auto_generation_settings(
    ctx: OperationContext,
    request: UpdateAutoGenerationRequest,
) -> OperationResult[AutoGenerationStatus]:
    """Enable, reconfigure or disable auto-generation for a user."""
    timer = start_timer()
    if (invalid := _require_user(request.user_id, timer.elapsed_ms)) is not None:
        return invalid

    scheduler = ctx.get_scheduler()
    try:
        scheduler.configure(
            request.user_id,
            enabled=request.enabled,
            interval=request.interval,
            time=request.time,
            timezone=request.timezone,
            day_of_week=request.day_of_week,
            paused=request.paused,
            notification_email=request.notification_email,
        )
        status = scheduler.get_status(request.user_id)
    except IdeagenError as e:
        logger.info("settings_update_rejected", user_id=request.user_id, code=e.code)
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    logger.info(
        "auto_generation_settings_updated",
        user_id=request.user_id,
        enabled=request.enabled,
        interval=request.interval,
        caller=ctx.caller,
    )
    return OperationResult.ok(status, elapsed_ms=timer.elapsed_ms)


def set_paused(
    ctx: OperationContext, request: SetPausedRequest
) -> OperationResult[AutoGenerationStatus]:
    """Pause or resume; the countdown target is not recomputed."""
    timer = start_timer()
    if (invalid := _require_user(request.user_id, timer.elapsed_ms)) is not None:
        return invalid

    scheduler = ctx.get_scheduler()
    try:
        scheduler.set_paused(request.user_id, request.paused)
        status = scheduler.get_status(request.user_id)
    except IdeagenError as e:
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(status, elapsed_ms=timer.elapsed_ms)


def pause_auto_generation(ctx: OperationContext, user_id: str) -> OperationResult[AutoGenerationStatus]:
    return set_paused(ctx, SetPausedRequest(user_id=user_id, paused=True))


def resume_auto_generation(ctx: OperationContext, user_id: str) -> OperationResult[AutoGenerationStatus]:
    return set_paused(ctx, SetPausedRequest(user_id=user_id, paused=False))


async def trigger_auto_generation(
    ctx: OperationContext, user_id: str
) -> OperationResult[RunOutcome]:
    """Run generation for one user now (same checks as the sweep)."""
    timer = start_timer()
    if (invalid := _require_user(user_id, timer.elapsed_ms)) is not None:
        return invalid
    if not ctx.generator_configured:
        return OperationResult.from_error(
            ConfigError("Trade-idea generator URL is not configured (IDEAGEN_GENERATOR_URL)"),
            elapsed_ms=timer.elapsed_ms,
        )

    try:
        outcome = await ctx.get_scheduler().run_for_user(user_id)
    except PersistenceError as e:
        logger.error("trigger_persistence_failed", user_id=user_id, error=e.message)
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    if outcome.success:
        return OperationResult.ok(outcome, elapsed_ms=timer.elapsed_ms)

    return OperationResult.fail(
        outcome.code.value if outcome.code else "GENERATION_FAILED",
        outcome.error or "Auto-generation failed",
        details={"user_id": user_id},
        retryable=outcome.will_retry,
        elapsed_ms=timer.elapsed_ms,
        metadata={"outcome": outcome.to_dict()},
    )


async def process_due_schedules(ctx: OperationContext) -> OperationResult[SweepResult]:
    """Run one sweep over every due schedule."""
    timer = start_timer()
    if not ctx.generator_configured:
        return OperationResult.from_error(
            ConfigError("Trade-idea generator URL is not configured (IDEAGEN_GENERATOR_URL)"),
            elapsed_ms=timer.elapsed_ms,
        )

    try:
        result = await ctx.get_scheduler().sweep()
    except PersistenceError as e:
        logger.error("sweep_aborted", error=e.message, caller=ctx.caller)
        return OperationResult.from_error(e, elapsed_ms=timer.elapsed_ms)

    return OperationResult.ok(result, elapsed_ms=timer.elapsed_ms)
