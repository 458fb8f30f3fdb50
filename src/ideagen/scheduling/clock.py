"""
Clock and timezone resolver.

Converts absolute instants into wall-clock components observed in an IANA
timezone and back.  All conversions go through :mod:`zoneinfo`, so DST
transitions come from the timezone database rather than hand-rolled
offset math.

Wall-clock resolution rules (``to_instant``):
    - A local time that occurs twice (fall-back hour) resolves to the
      first occurrence (``fold=0``).
    - A local time that does not exist (spring-forward gap) resolves
      using the offset in force before the gap, which lands the same
      distance past the transition (02:30 on a 02:00→03:00 day becomes
      03:30 local).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ideagen.core.errors import InvalidScheduleConfigError
from ideagen.core.timestamps import ensure_utc, utc_now

# A clock returns the current instant as an aware UTC datetime
Clock = Callable[[], datetime]

system_clock: Clock = utc_now


@dataclass(frozen=True, slots=True)
class LocalTime:
    """Wall-clock components of an instant as observed in a timezone."""

    date: date
    hour: int
    minute: int
    second: int
    microsecond: int
    timezone: str

    @property
    def weekday(self) -> int:
        """Monday is 0, Sunday is 6."""
        return self.date.weekday()

    @property
    def time_of_day(self) -> time:
        return time(self.hour, self.minute, self.second, self.microsecond)


@lru_cache(maxsize=256)
def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA timezone.

    Raises:
        InvalidScheduleConfigError: if ``name`` is not a known timezone key.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidScheduleConfigError(
            "timezone", name, f"Unknown timezone: {name!r}"
        ) from e


def is_valid_timezone(name: str) -> bool:
    try:
        resolve_timezone(name)
    except InvalidScheduleConfigError:
        return False
    return True


def local_components(instant: datetime, timezone: str) -> LocalTime:
    """Break ``instant`` into date/hour/minute as observed in ``timezone``."""
    local = ensure_utc(instant).astimezone(resolve_timezone(timezone))
    return LocalTime(
        date=local.date(),
        hour=local.hour,
        minute=local.minute,
        second=local.second,
        microsecond=local.microsecond,
        timezone=timezone,
    )


def to_instant(local_date: date, hour: int, minute: int, timezone: str) -> datetime:
    """Resolve a timezone-local date and ``hour:minute:00`` to a UTC instant."""
    local = datetime.combine(
        local_date, time(hour, minute), tzinfo=resolve_timezone(timezone)
    )
    return local.astimezone(UTC)


def format_time_left(remaining: timedelta) -> str:
    """Render a countdown the way the dashboard shows it.

    Examples:
        >>> format_time_left(timedelta(days=1, hours=2, minutes=3, seconds=4))
        '1d 2h 3m'
        >>> format_time_left(timedelta(minutes=5, seconds=7))
        '5m 7s'
        >>> format_time_left(timedelta(seconds=42))
        '42s'
        >>> format_time_left(timedelta(seconds=-1))
        'Due now'
    """
    total = int(remaining.total_seconds())
    if total <= 0:
        return "Due now"

    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
