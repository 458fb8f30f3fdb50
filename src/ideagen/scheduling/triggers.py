"""
Trigger calculator.

``compute_next_trigger(spec, now)`` answers "when does this schedule fire
next?" as an absolute UTC instant.  It is a pure function of its inputs.

TimeOfDay evaluation::

    now (UTC) ──► wall clock in spec.timezone ──► candidate date
                                                      │
                  candidate date @ hour:minute in spec.timezone
                                ──► UTC instant       │
                                                      │
                 instant <= now? ─────────────────────┤
                     yes: +1 local day (daily)        │
                          +7 local days (weekly)      │
                                                      ▼
                                             next trigger (UTC)

The advance is applied to the local date before converting, so the local
``hour:minute`` survives DST changes between today and the next firing.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ideagen.core.logging import get_logger
from ideagen.core.timestamps import ensure_utc
from ideagen.scheduling.clock import local_components, to_instant
from ideagen.scheduling.intervals import (
    NOMINAL_PERIODS,
    FixedPeriod,
    IntervalSpec,
    Recurrence,
    TimeOfDay,
)

logger = get_logger(__name__)


def compute_next_trigger(spec: IntervalSpec, now: datetime) -> datetime:
    """Return the next absolute instant at which generation should fire.

    Args:
        spec: Interval specification
        now: Reference instant (naive values are taken as UTC)

    Returns:
        Aware UTC datetime strictly after ``now``
    """
    now = ensure_utc(now)

    if isinstance(spec, FixedPeriod):
        return now + spec.duration

    if isinstance(spec, TimeOfDay):
        recurrence = _recurrence(spec)
        if spec.hour is None or spec.minute is None:
            return now + NOMINAL_PERIODS[recurrence]
        return _next_wall_clock_occurrence(spec, recurrence, now)

    logger.warning("unknown_interval_spec", spec=repr(spec), fallback="weekly")
    return now + NOMINAL_PERIODS[Recurrence.WEEKLY]


def _recurrence(spec: TimeOfDay) -> Recurrence:
    try:
        return Recurrence(spec.recurrence)
    except ValueError:
        logger.warning("unknown_recurrence", recurrence=str(spec.recurrence), fallback="weekly")
        return Recurrence.WEEKLY


def _next_wall_clock_occurrence(
    spec: TimeOfDay, recurrence: Recurrence, now: datetime
) -> datetime:
    local = local_components(now, spec.timezone)
    step = timedelta(days=7 if recurrence is Recurrence.WEEKLY else 1)

    target_date = local.date
    if recurrence is Recurrence.WEEKLY and spec.day_of_week is not None:
        target_date += timedelta(days=(spec.day_of_week - local.weekday) % 7)

    # Compare resolved instants: a time inside a spring-forward gap resolves
    # later than its wall-clock value, and a repeated fall-back time resolves
    # to its first occurrence
    candidate = to_instant(target_date, spec.hour, spec.minute, spec.timezone)
    if candidate <= now:
        candidate = to_instant(target_date + step, spec.hour, spec.minute, spec.timezone)
    return candidate
