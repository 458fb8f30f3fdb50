"""
Error handling: maps ops error codes to RFC 7807 responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from ideagen.api.schemas import ErrorDetail, ProblemDetail
from ideagen.core.logging import get_logger

logger = get_logger(__name__)

# ── Error code → HTTP status mapping ─────────────────────────────────────

ERROR_CODE_TO_STATUS: dict[str, int] = {
    "VALIDATION_FAILED": 400,
    "INVALID_SCHEDULE": 400,
    "UNAUTHORIZED": 401,
    "NOT_FOUND": 404,
    "NOT_ENABLED": 409,
    "PAUSED": 409,
    "CONCURRENCY_CONFLICT": 409,
    "LOCKED": 423,
    "GENERATION_FAILED": 502,
    "CONFIG_ERROR": 503,
    "PERSISTENCE_FAILED": 500,
    "INTERNAL": 500,
}


def status_for_error_code(code: str) -> int:
    """Resolve an ops error code to HTTP status, defaulting to 500."""
    return ERROR_CODE_TO_STATUS.get(code, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    code: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        code=code,
    )
    if errors:
        body.errors = [ErrorDetail(**e) for e in errors]
    return JSONResponse(
        status_code=status,
        content=body.model_dump(),
        media_type="application/problem+json",
    )


def handle_error(result) -> JSONResponse:
    """Convert a failed ``OperationResult`` into a Problem Details response."""
    code = result.error.code if result.error else "INTERNAL"
    details = result.error.details if result.error else {}
    return problem_response(
        status=status_for_error_code(code),
        title=result.error.message if result.error else "Operation failed",
        detail=", ".join(f"{k}={v}" for k, v in details.items()),
        code=code,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: 500 with ProblemDetail."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred.",
        instance=str(request.url),
        code="INTERNAL",
    )
