"""
Structured error types for ideagen.

Every error raised by the scheduler carries a category, a retryable flag
and optional context, so the ops layer can turn it into an
``OperationResult`` and the logs can record it as structured fields.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        IdeagenError                           │
        │  (category, retryable, retry_after, context, cause)          │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ScheduleStateError      GenerationFailedError                │
        │  (SCHEDULE)              (GENERATION, retryable)              │
        │       │                                                       │
        │  NotEnabledError         PersistenceError (DATABASE)          │
        │  PausedError                  │                               │
        │                          ConcurrencyConflictError             │
        │                                                               │
        │  InvalidScheduleConfigError   ConfigError   NotificationError │
        │  (VALIDATION)                 (CONFIG)      (NOTIFICATION)    │
        └──────────────────────────────────────────────────────────────┘

Propagation:
    ``NotEnabledError``, ``PausedError`` and ``GenerationFailedError`` are
    reported through ``RunOutcome`` and never escape
    ``GenerationOrchestrator.run_for_user``.  ``PersistenceError`` is the
    one error allowed to propagate out of a single user's attempt; the
    sweep still isolates it per user.

Usage:
    from ideagen.core.errors import PersistenceError

    try:
        repo.apply_update(record, update)
    except sqlite3.Error as e:
        raise PersistenceError("schedule update failed", cause=e)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    SCHEDULE = "SCHEDULE"
    GENERATION = "GENERATION"
    DATABASE = "DATABASE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    NOTIFICATION = "NOTIFICATION"
    NETWORK = "NETWORK"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        user_id: Owner of the schedule being processed
        schedule_id: Schedule row identifier
        operation: Operation that failed (``run_for_user``, ``sweep``, ...)
        channel: Notification channel name, for delivery errors
        metadata: Additional key-value pairs
    """

    user_id: str | None = None
    schedule_id: str | None = None
    operation: str | None = None
    channel: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["user_id", "schedule_id", "operation", "channel"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class IdeagenError(Exception):
    """
    Base exception for all ideagen errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    rarely have to pass them explicitly.

    Examples:
        >>> error = IdeagenError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(user_id="u-1").context.user_id
        'u-1'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    # Machine-readable code used by the ops layer and RunOutcome
    code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> IdeagenError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PersistenceError("write failed").with_context(user_id="u-1")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }

        if self.retry_after is not None:
            result["retry_after"] = self.retry_after

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEDULE STATE (local, no retry, no notification)
# =============================================================================


class ScheduleStateError(IdeagenError):
    """The schedule is not in a state that allows generation."""

    default_category = ErrorCategory.SCHEDULE
    code = "SCHEDULE_STATE"


class NotEnabledError(ScheduleStateError):
    """Auto-generation is disabled or the user has no schedule."""

    code = "NOT_ENABLED"

    def __init__(self, user_id: str, message: str | None = None):
        super().__init__(
            message or "Auto-generation is not enabled",
            context=ErrorContext(user_id=user_id),
        )


class PausedError(ScheduleStateError):
    """The user's schedule is paused."""

    code = "PAUSED"

    def __init__(self, user_id: str, message: str | None = None):
        super().__init__(
            message or "Auto-generation is paused",
            context=ErrorContext(user_id=user_id),
        )


# =============================================================================
# GENERATION
# =============================================================================


class GenerationFailedError(IdeagenError):
    """The external trade-idea generator failed or threw.

    Recovered locally by the retry policy; surfaced to the user only via
    notification.
    """

    default_category = ErrorCategory.GENERATION
    default_retryable = True
    code = "GENERATION_FAILED"


# =============================================================================
# PERSISTENCE
# =============================================================================


class PersistenceError(IdeagenError):
    """Reading or writing schedule state failed."""

    default_category = ErrorCategory.DATABASE
    code = "PERSISTENCE_FAILED"


class ConcurrencyConflictError(PersistenceError):
    """The schedule row changed between read and write (version mismatch)."""

    code = "CONCURRENCY_CONFLICT"

    def __init__(self, schedule_id: str, expected_version: int):
        super().__init__(
            f"Schedule {schedule_id} was modified concurrently "
            f"(expected version {expected_version})",
            context=ErrorContext(
                schedule_id=schedule_id,
                metadata={"expected_version": expected_version},
            ),
        )
        self.schedule_id = schedule_id
        self.expected_version = expected_version


# =============================================================================
# CONFIGURATION / VALIDATION
# =============================================================================


class InvalidScheduleConfigError(IdeagenError):
    """A settings update carried an unusable interval, time, timezone or weekday."""

    default_category = ErrorCategory.VALIDATION
    code = "INVALID_SCHEDULE"

    def __init__(self, field_name: str, value: Any, message: str | None = None):
        super().__init__(
            message or f"Invalid value for {field_name}: {value!r}",
            context=ErrorContext(metadata={"field": field_name, "value": value}),
        )
        self.field_name = field_name
        self.value = value


class ConfigError(IdeagenError):
    """Missing or invalid runtime configuration."""

    default_category = ErrorCategory.CONFIG
    code = "CONFIG_ERROR"


# =============================================================================
# NOTIFICATION
# =============================================================================


class NotificationError(IdeagenError):
    """A notification channel could not deliver an event."""

    default_category = ErrorCategory.NOTIFICATION
    default_retryable = True
    code = "NOTIFICATION_FAILED"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def error_message(error: BaseException | None, default: str = "Unknown error") -> str:
    """Return a user-facing message for any exception."""
    if error is None:
        return default
    if isinstance(error, IdeagenError):
        return error.message
    return str(error) or default


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, IdeagenError):
        return error.category

    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION

    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "IdeagenError",
    "ScheduleStateError",
    "NotEnabledError",
    "PausedError",
    "GenerationFailedError",
    "PersistenceError",
    "ConcurrencyConflictError",
    "InvalidScheduleConfigError",
    "ConfigError",
    "NotificationError",
    "error_message",
    "categorize_error",
]
