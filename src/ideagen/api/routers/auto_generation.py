"""
Auto-generation router: per-user settings, pause toggle and manual runs.

GET  /users/{user_id}/auto-generation
PUT  /users/{user_id}/auto-generation
POST /users/{user_id}/auto-generation/pause
POST /users/{user_id}/auto-generation/resume
POST /users/{user_id}/auto-generation/trigger
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from ideagen.api.deps import OpContext
from ideagen.api.errors import handle_error
from ideagen.api.schemas import AutoGenerationStatusSchema, RunOutcomeSchema, SuccessResponse
from ideagen.scheduling.intervals import DEFAULT_INTERVAL, DEFAULT_TIMEZONE

router = APIRouter(prefix="/users/{user_id}/auto-generation")


class UpdateAutoGenerationBody(BaseModel):
    enabled: bool = True
    interval: str = DEFAULT_INTERVAL
    time: str | None = Field(default=None, description="Local HH:MM (daily/weekly)")
    timezone: str = DEFAULT_TIMEZONE
    day_of_week: int | str | None = Field(default=None, description="0=Monday … 6=Sunday, or a day name")
    paused: bool = False
    notification_email: str | None = None


def _status_response(result) -> SuccessResponse[AutoGenerationStatusSchema]:
    return SuccessResponse(
        data=AutoGenerationStatusSchema(**asdict(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.get("", response_model=SuccessResponse[AutoGenerationStatusSchema])
def get_status(ctx: OpContext, user_id: str = Path(..., description="User ID")):
    """Current settings, next/last generation and countdown of one user."""
    from ideagen.ops.auto_generation import get_auto_generation_status

    result = get_auto_generation_status(ctx, user_id)
    if not result.success:
        return handle_error(result)
    return _status_response(result)


@router.put("", response_model=SuccessResponse[AutoGenerationStatusSchema])
def update_settings(
    ctx: OpContext,
    body: UpdateAutoGenerationBody,
    user_id: str = Path(..., description="User ID"),
):
    """Enable, reconfigure or disable auto-generation.

    Enabling replaces any previous schedule of the user and computes the
    first trigger.  Disabling leaves the last ``next_generation`` stale.

    Raises:
        400 INVALID_SCHEDULE: Unknown interval, bad HH:MM, timezone or weekday.

    Example:
        PUT /api/v1/users/u-1/auto-generation
        {"interval": "daily", "time": "09:00", "timezone": "Europe/Zurich"}
    """
    from ideagen.ops.auto_generation import update_auto_generation_settings
    from ideagen.ops.requests import UpdateAutoGenerationRequest

    request = UpdateAutoGenerationRequest(user_id=user_id, **body.model_dump())
    result = update_auto_generation_settings(ctx, request)
    if not result.success:
        return handle_error(result)
    return _status_response(result)


@router.post("/pause", response_model=SuccessResponse[AutoGenerationStatusSchema])
def pause(ctx: OpContext, user_id: str = Path(..., description="User ID")):
    """Pause; the countdown target is kept."""
    from ideagen.ops.auto_generation import pause_auto_generation

    result = pause_auto_generation(ctx, user_id)
    if not result.success:
        return handle_error(result)
    return _status_response(result)


@router.post("/resume", response_model=SuccessResponse[AutoGenerationStatusSchema])
def resume(ctx: OpContext, user_id: str = Path(..., description="User ID")):
    from ideagen.ops.auto_generation import resume_auto_generation

    result = resume_auto_generation(ctx, user_id)
    if not result.success:
        return handle_error(result)
    return _status_response(result)


@router.post("/trigger", response_model=SuccessResponse[RunOutcomeSchema])
async def trigger(ctx: OpContext, user_id: str = Path(..., description="User ID")):
    """Generate now, with the same checks and retry rules as the sweep.

    Raises:
        409 NOT_ENABLED / PAUSED: Nothing to run.
        423 LOCKED: Another run for this user is in flight.
        502 GENERATION_FAILED: The generator failed; a retry may be scheduled.
    """
    from ideagen.ops.auto_generation import trigger_auto_generation

    result = await trigger_auto_generation(ctx, user_id)
    if not result.success:
        return handle_error(result)
    return SuccessResponse(
        data=RunOutcomeSchema(**result.data.to_dict()),
        elapsed_ms=result.elapsed_ms,
    )
