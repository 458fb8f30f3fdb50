"""
Interval specifications and the user-facing interval options.

Two shapes of schedule exist:

    FixedPeriod(duration)
        Fire ``duration`` after the reference instant.  Used for
        ``hourly``, ``4hours``, ``6hours``, ``8hours`` and ``12hours``.

    TimeOfDay(hour, minute, timezone, recurrence, day_of_week)
        Fire at ``hour:minute`` wall-clock time in ``timezone``, every day
        (``daily``) or every week (``weekly``).  ``day_of_week`` pins a
        weekly schedule to a weekday (Monday=0); when it is ``None`` the
        weekday is that of the day the trigger is computed on.

Option table::

    ┌──────────┬────────────────────────────────────────────┐
    │ option   │ spec                                       │
    ├──────────┼────────────────────────────────────────────┤
    │ hourly   │ FixedPeriod(1h)                            │
    │ 4hours   │ FixedPeriod(4h)                            │
    │ 6hours   │ FixedPeriod(6h)                            │
    │ 8hours   │ FixedPeriod(8h)                            │
    │ 12hours  │ FixedPeriod(12h)                           │
    │ daily    │ TimeOfDay(h, m, tz, DAILY)   needs "HH:MM" │
    │ weekly   │ TimeOfDay(h, m, tz, WEEKLY)  needs "HH:MM" │
    └──────────┴────────────────────────────────────────────┘

``daily``/``weekly`` without a time keep the TimeOfDay shape with
``hour``/``minute`` unset; the trigger calculator then falls back to the
recurrence's nominal period (24h / 7×24h).  Unknown options are read as
``weekly``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from ideagen.core.errors import InvalidScheduleConfigError
from ideagen.core.logging import get_logger
from ideagen.scheduling.clock import resolve_timezone

logger = get_logger(__name__)


class Recurrence(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True, slots=True)
class FixedPeriod:
    """Fire a fixed duration after the reference instant."""

    duration: timedelta


@dataclass(frozen=True, slots=True)
class TimeOfDay:
    """Fire at a wall-clock time in an IANA timezone."""

    hour: int | None
    minute: int | None
    timezone: str = "UTC"
    recurrence: Recurrence = Recurrence.DAILY
    day_of_week: int | None = None


IntervalSpec = FixedPeriod | TimeOfDay


FIXED_INTERVALS: dict[str, timedelta] = {
    "hourly": timedelta(hours=1),
    "4hours": timedelta(hours=4),
    "6hours": timedelta(hours=6),
    "8hours": timedelta(hours=8),
    "12hours": timedelta(hours=12),
}

NOMINAL_PERIODS: dict[Recurrence, timedelta] = {
    Recurrence.DAILY: timedelta(days=1),
    Recurrence.WEEKLY: timedelta(days=7),
}

INTERVAL_CHOICES: tuple[str, ...] = (*FIXED_INTERVALS, "daily", "weekly")
DEFAULT_INTERVAL = "weekly"
DEFAULT_TIMEZONE = "UTC"

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` (24h clock).

    Raises:
        InvalidScheduleConfigError: if the value is malformed or out of range.
    """
    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidScheduleConfigError("time", value, f"Time must be HH:MM, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidScheduleConfigError("time", value, f"Time out of range: {value!r}")
    return hour, minute


def parse_day_of_week(value: int | str | None) -> int | None:
    """Accept 0-6 (Monday=0) or a weekday name."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        name = value.strip().lower()
        if name.isdigit():
            value = int(name)
        else:
            for index, weekday in enumerate(WEEKDAY_NAMES):
                if name in (weekday, weekday[:3]):
                    return index
            raise InvalidScheduleConfigError("day_of_week", value)
    if not 0 <= value <= 6:
        raise InvalidScheduleConfigError("day_of_week", value)
    return value


def validate_interval_settings(
    interval: str,
    time: str | None = None,
    timezone: str = DEFAULT_TIMEZONE,
    day_of_week: int | str | None = None,
) -> None:
    """Strict validation for a settings update.

    Raises:
        InvalidScheduleConfigError: on an unknown option, malformed time,
            unknown timezone, or a weekday on a non-weekly interval.
    """
    if interval not in INTERVAL_CHOICES:
        raise InvalidScheduleConfigError(
            "interval",
            interval,
            f"Unknown interval {interval!r}; expected one of {', '.join(INTERVAL_CHOICES)}",
        )
    if time:
        parse_time_of_day(time)
    resolve_timezone(timezone)
    if day_of_week is not None and day_of_week != "":
        if interval != "weekly":
            raise InvalidScheduleConfigError(
                "day_of_week", day_of_week, "day_of_week only applies to the weekly interval"
            )
        parse_day_of_week(day_of_week)


def interval_spec_from_settings(
    interval: str | None,
    time: str | None = None,
    timezone: str | None = DEFAULT_TIMEZONE,
    day_of_week: int | None = None,
) -> IntervalSpec:
    """Map a stored interval option onto an :data:`IntervalSpec`.

    Lenient: an unknown option is read as ``weekly`` and a malformed time
    is treated as absent, so a bad row can never stop the scheduler.
    """
    interval = interval or DEFAULT_INTERVAL
    timezone = timezone or DEFAULT_TIMEZONE

    if interval in FIXED_INTERVALS:
        return FixedPeriod(FIXED_INTERVALS[interval])

    if interval == "daily":
        recurrence = Recurrence.DAILY
    else:
        if interval != "weekly":
            logger.warning("unknown_interval_option", interval=interval, fallback="weekly")
        recurrence = Recurrence.WEEKLY

    hour = minute = None
    if time:
        try:
            hour, minute = parse_time_of_day(time)
        except InvalidScheduleConfigError:
            logger.warning("invalid_scheduled_time", time=time, interval=interval)

    return TimeOfDay(
        hour=hour,
        minute=minute,
        timezone=timezone,
        recurrence=recurrence,
        day_of_week=day_of_week if recurrence is Recurrence.WEEKLY else None,
    )


def describe_interval(spec: IntervalSpec) -> str:
    """Short human description (``every 4h``, ``daily at 09:00 Europe/Zurich``)."""
    if isinstance(spec, FixedPeriod):
        hours = spec.duration.total_seconds() / 3600
        return f"every {hours:g}h"
    if spec.hour is None or spec.minute is None:
        return f"{spec.recurrence.value} (every {NOMINAL_PERIODS[spec.recurrence].days}d)"
    text = f"{spec.recurrence.value} at {spec.hour:02d}:{spec.minute:02d} {spec.timezone}"
    if spec.recurrence is Recurrence.WEEKLY and spec.day_of_week is not None:
        text += f" on {WEEKDAY_NAMES[spec.day_of_week].capitalize()}"
    return text
