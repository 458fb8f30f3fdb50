"""
Notification events emitted by the scheduler.

One event is produced per completed attempt:

    auto_generation_success   new idea generated (direction / pair / confidence)
    auto_generation_retry     failed, another attempt after the retry delay
    auto_generation_error     failed with retries exhausted, normal cadence resumes

The builders never fail on missing idea metadata; absent fields fall back
to neutral placeholders.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from ideagen.core.timestamps import utc_now

DEFAULT_DIRECTION = "N/A"
DEFAULT_PAIR = "USD/CHF"
DEFAULT_CONFIDENCE = 0.0


class EventKind(str, Enum):
    SUCCESS = "auto_generation_success"
    RETRY = "auto_generation_retry"
    FAILURE = "auto_generation_error"


@dataclass
class NotificationEvent:
    """A user-facing event, delivered to every enabled channel."""

    user_id: str
    kind: EventKind
    title: str
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)
    email: str | None = None
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (webhook payloads, logs)."""
        return {
            "user_id": self.user_id,
            "type": self.kind.value,
            "title": self.title,
            "message": self.message,
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
        }


def _js_round(value: float) -> int:
    # Half-up rounding, as the dashboard displays it
    return int(math.floor(value + 0.5))


def _confidence(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(value):
        return DEFAULT_CONFIDENCE
    return value


def success_event(user_id: str, idea: Mapping[str, Any] | None) -> NotificationEvent:
    """Build the "new idea generated" event from a generated trade idea."""
    idea = idea or {}
    direction = idea.get("direction") or DEFAULT_DIRECTION
    pair = idea.get("currency_pair") or idea.get("pair") or DEFAULT_PAIR
    confidence = _confidence(idea.get("confidence"))

    return NotificationEvent(
        user_id=user_id,
        kind=EventKind.SUCCESS,
        title="New Trade Idea Generated",
        message=f"{direction} {pair} with {_js_round(confidence)}% confidence",
        metadata={
            "direction": direction,
            "confidence": confidence,
            "currency_pair": pair,
            "trade_idea_id": idea.get("id"),
        },
    )


def describe_delay(delay: timedelta) -> str:
    """``1 hour``, ``2 hours``, ``30 minutes``, ``45 seconds``."""
    seconds = int(delay.total_seconds())
    if seconds % 3600 == 0:
        hours = seconds // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    if seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds} seconds"


def retry_event(
    user_id: str,
    attempt: int,
    max_retries: int,
    retry_delay: timedelta,
    error: str,
) -> NotificationEvent:
    """Build the "will retry" event; ``attempt`` is the new retry count."""
    return NotificationEvent(
        user_id=user_id,
        kind=EventKind.RETRY,
        title="Auto-Generation Retry",
        message=(
            f"Auto-generation failed but will retry in {describe_delay(retry_delay)}. "
            f"(Attempt {attempt}/{max_retries})"
        ),
        metadata={"attempt": attempt, "max_retries": max_retries, "error": error},
    )


def final_failure_event(user_id: str, max_retries: int, error: str) -> NotificationEvent:
    """Build the "retries exhausted, back to the normal cadence" event."""
    return NotificationEvent(
        user_id=user_id,
        kind=EventKind.FAILURE,
        title="Auto-Generation Failed",
        message=(
            f"Auto-generation failed after {max_retries} retries. "
            "Next attempt scheduled for the next interval."
        ),
        metadata={"max_retries": max_retries, "error": error},
    )
