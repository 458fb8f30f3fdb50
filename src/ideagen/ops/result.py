"""
Return type shared by the scheduler operations.

``update_auto_generation_settings``, ``trigger_auto_generation``, the
notification inbox calls and the sweep all hand back an
:class:`OperationResult` instead of raising.  The HTTP routers turn a
failed one into a Problem Details response keyed by ``error.code``; the
CLI prints the code and exits non-zero.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ideagen.core.errors import ErrorCategory, IdeagenError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why a scheduler operation did not succeed.

    ``code`` is what the API maps to an HTTP status (``NOT_ENABLED`` is
    409, ``LOCKED`` is 423, ...).  ``retryable`` tells a caller that the
    same request may work later, e.g. after a database lock clears.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.details:
            payload["details"] = self.details
        return payload


@dataclass
class OperationResult(Generic[T]):
    """Payload or error from one scheduler operation, plus its timing.

    Build instances with :meth:`ok`, :meth:`fail` or :meth:`from_error`.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Failure with an explicit code, for checks made before any schedule work.

        ``trigger_auto_generation`` also uses it for a finished run that did not
        succeed, carrying the run outcome in ``metadata``.
        """
        error = OperationError(code, message, category, details or {}, retryable)
        return cls(success=False, error=error, elapsed_ms=elapsed_ms, metadata=metadata or {})

    @classmethod
    def from_error(cls, error: IdeagenError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Failure built from a raised :class:`IdeagenError` and its context."""
        return cls.fail(
            error.code,
            error.message,
            category=error.category,
            details=error.context.to_dict(),
            retryable=error.retryable,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for logs and JSON output; empty parts are left out."""
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        if self.warnings:
            payload["warnings"] = self.warnings
        if self.elapsed_ms:
            payload["elapsed_ms"] = round(self.elapsed_ms, 2)
        if self.metadata:
            payload["metadata"] = self.metadata
        return payload


@dataclass(slots=True)
class Stopwatch:
    """Wall time since creation, reported as ``elapsed_ms`` on each result."""

    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000


def start_timer() -> Stopwatch:
    return Stopwatch()
