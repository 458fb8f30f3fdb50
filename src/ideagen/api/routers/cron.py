"""
Cron router: the HTTP trigger for one sweep over all due schedules.

GET  /cron/auto-generation
POST /cron/auto-generation

Both require ``Authorization: Bearer <IDEAGEN_CRON_SECRET>``.
"""

from __future__ import annotations

import secrets

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse

from ideagen.api.deps import OpContext, Settings
from ideagen.api.errors import problem_response
from ideagen.api.schemas import CronResponse
from ideagen.core.logging import get_logger
from ideagen.core.timestamps import utc_now

logger = get_logger(__name__)

router = APIRouter(prefix="/cron")


def _authorized(authorization: str | None, secret: str | None) -> bool:
    # An unset secret rejects every caller
    if not secret or not authorization:
        return False
    scheme, _, token = authorization.partition(" ")
    return scheme.lower() == "bearer" and secrets.compare_digest(token.strip(), secret)


@router.api_route("/auto-generation", methods=["GET", "POST"], response_model=CronResponse)
async def run_auto_generation(
    ctx: OpContext,
    settings: Settings,
    authorization: str | None = Header(default=None),
):
    """Process every due schedule once.

    Example:
        POST /api/v1/cron/auto-generation
        Authorization: Bearer <secret>

        Response:
        {"success": true, "processed": 3, "errors": 1, "skipped": 0,
         "timestamp": "2026-03-29T07:00:00.120000Z"}
    """
    from ideagen.ops.auto_generation import process_due_schedules

    if not _authorized(authorization, settings.cron_secret):
        logger.warning("cron_unauthorized", request_id=ctx.request_id)
        return problem_response(status=401, title="Unauthorized", code="UNAUTHORIZED")

    ctx.caller = "cron"
    result = await process_due_schedules(ctx)
    if not result.success:
        body = CronResponse(
            success=False,
            timestamp=utc_now(),
            error=result.error.message if result.error else "Sweep failed",
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    summary = result.data
    logger.info(
        "cron_sweep_finished",
        processed=summary.processed,
        errors=summary.errors,
        skipped=summary.skipped,
    )
    return CronResponse(
        success=True,
        processed=summary.processed,
        errors=summary.errors,
        skipped=summary.skipped,
        timestamp=summary.finished_at or utc_now(),
    )
