"""
Retry policy.

Decides the schedule fields that follow one completed generation attempt.
The policy is pure: it reads a :class:`ScheduleRecord`, returns a
:class:`ScheduleUpdate` (and, for failures, the notification event to
emit) and never touches storage.

Failure path::

    retry_count < max_retries ──► retry_count + 1, next = now + retry_delay
                                  event: "will retry ... (Attempt N/max)"
    otherwise                 ──► retry_count = 0, next = normal trigger
                                  event: "failed after max retries"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ideagen.core.timestamps import ensure_utc
from ideagen.notifications.events import (
    NotificationEvent,
    final_failure_event,
    retry_event,
)
from ideagen.scheduling.models import ScheduleRecord, ScheduleUpdate
from ideagen.scheduling.triggers import compute_next_trigger

DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY = timedelta(hours=1)


@dataclass(frozen=True)
class FailureDecision:
    """Outcome of :meth:`RetryPolicy.on_failure`."""

    update: ScheduleUpdate
    event: NotificationEvent
    will_retry: bool


class RetryPolicy:
    """Bounded retry with a fixed delay, then back to the normal cadence.

    Example:
        >>> policy = RetryPolicy()
        >>> decision = policy.on_failure(record, "quota reached", now)
        >>> decision.update.retry_count
        1
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: timedelta = DEFAULT_RETRY_DELAY,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if retry_delay <= timedelta(0):
            raise ValueError("retry_delay must be positive")
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def on_success(self, schedule: ScheduleRecord, now: datetime) -> ScheduleUpdate:
        """Fields after a successful generation completed at ``now``.

        The next trigger is computed from ``now``, never from the previous
        ``next_trigger``, so a late sweep does not carry its delay forward.
        """
        now = ensure_utc(now)
        return ScheduleUpdate(
            next_trigger=compute_next_trigger(schedule.interval_spec, now),
            retry_count=0,
            last_error=None,
            last_triggered=now,
        )

    def on_failure(
        self, schedule: ScheduleRecord, error_message: str, now: datetime
    ) -> FailureDecision:
        """Fields and notification after a failed generation at ``now``."""
        now = ensure_utc(now)

        if schedule.retry_count < self.max_retries:
            attempt = schedule.retry_count + 1
            return FailureDecision(
                update=ScheduleUpdate(
                    next_trigger=now + self.retry_delay,
                    retry_count=attempt,
                    last_error=error_message,
                ),
                event=retry_event(
                    schedule.user_id,
                    attempt,
                    self.max_retries,
                    self.retry_delay,
                    error_message,
                ),
                will_retry=True,
            )

        return FailureDecision(
            update=ScheduleUpdate(
                next_trigger=compute_next_trigger(schedule.interval_spec, now),
                retry_count=0,
                last_error=None,
                last_triggered=now,
            ),
            event=final_failure_event(schedule.user_id, self.max_retries, error_message),
            will_retry=False,
        )
