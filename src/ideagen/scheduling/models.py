"""Schedule models (``auto_generation_schedules``).

``ScheduleRecord`` is the single source of truth for a user's
auto-generation state.  ``AutoGenerationStatus`` is the read-only
convenience view handed to the dashboard; it is always derived from the
record and never written independently.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any

from ideagen.scheduling.clock import format_time_left
from ideagen.scheduling.intervals import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEZONE,
    IntervalSpec,
    interval_spec_from_settings,
)

# ---------------------------------------------------------------------------
# auto_generation_schedules
# ---------------------------------------------------------------------------


@dataclass
class ScheduleRecord:
    """Schedule row (``auto_generation_schedules``)."""

    id: str = ""
    user_id: str = ""
    interval_type: str = DEFAULT_INTERVAL  # hourly, 4hours, ..., daily, weekly
    scheduled_time: str | None = None  # HH:MM for daily/weekly
    timezone: str = DEFAULT_TIMEZONE
    day_of_week: int | None = None  # weekly only, Monday=0
    notification_email: str | None = None
    enabled: bool = True
    paused: bool = False
    next_trigger: datetime | None = None
    retry_count: int = 0
    last_error: str | None = None
    last_triggered: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    @property
    def interval_spec(self) -> IntervalSpec:
        return interval_spec_from_settings(
            self.interval_type,
            self.scheduled_time,
            self.timezone,
            self.day_of_week,
        )

    def is_due(self, now: datetime) -> bool:
        """Due iff enabled, not paused and ``now >= next_trigger``."""
        return (
            self.enabled
            and not self.paused
            and self.next_trigger is not None
            and now >= self.next_trigger
        )


class _Unset:
    """Marker for "leave this column alone" in a partial update."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class ScheduleUpdate:
    """Partial update of a schedule row.

    Fields left as ``UNSET`` are not written; ``None`` clears a nullable
    column (e.g. ``last_error=None``).
    """

    next_trigger: datetime | None = UNSET
    retry_count: int = UNSET
    last_error: str | None = UNSET
    last_triggered: datetime | None = UNSET
    paused: bool = UNSET
    enabled: bool = UNSET

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply_to(self, record: ScheduleRecord) -> ScheduleRecord:
        """Return a copy of ``record`` with these changes applied (no I/O)."""
        return replace(record, **self.changes())


@dataclass
class ScheduleCreate:
    """DTO for creating the active schedule of a user."""

    user_id: str
    interval_type: str
    next_trigger: datetime
    scheduled_time: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    day_of_week: int | None = None
    notification_email: str | None = None
    paused: bool = False


# ---------------------------------------------------------------------------
# Dashboard view
# ---------------------------------------------------------------------------


@dataclass
class AutoGenerationStatus:
    """Read-only view of a user's auto-generation state."""

    enabled: bool = False
    interval: str = DEFAULT_INTERVAL
    time: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    day_of_week: int | None = None
    paused: bool = False
    next_generation: datetime | None = None
    last_generation: datetime | None = None
    retry_count: int = 0
    last_error: str | None = None
    time_left: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(
        cls, record: ScheduleRecord | None, now: datetime
    ) -> AutoGenerationStatus:
        """Derive the view from the active record (defaults if there is none)."""
        if record is None:
            return cls()

        time_left = None
        if record.enabled and record.next_trigger is not None:
            time_left = format_time_left(record.next_trigger - now)

        return cls(
            enabled=record.enabled,
            interval=record.interval_type,
            time=record.scheduled_time,
            timezone=record.timezone,
            day_of_week=record.day_of_week,
            paused=record.paused,
            next_generation=record.next_trigger if record.enabled else None,
            last_generation=record.last_triggered,
            retry_count=record.retry_count,
            last_error=record.last_error,
            time_left=time_left,
            metadata={"schedule_id": record.id, "version": record.version},
        )
