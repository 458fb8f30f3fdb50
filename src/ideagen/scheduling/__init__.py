"""
Auto-generation scheduling.

Components:
    - clock: timezone resolver and wall-clock conversions
    - intervals: ``FixedPeriod`` / ``TimeOfDay`` specs and interval options
    - triggers: ``compute_next_trigger``
    - retry: bounded retry policy
    - repository: SQLite schedule store with version compare-and-swap
    - lock_manager: per-user TTL lease
    - orchestrator: ``run_for_user`` and settings changes
    - sweep: processes every due schedule
    - service: wires the above together

Example:
    >>> from ideagen.scheduling import AutoGenerationService
    >>> service = AutoGenerationService(conn, generator=generator, notifier=dispatcher)
    >>> service.configure("u-1", interval="daily", time="09:00", timezone="Europe/Zurich")
    >>> result = await service.sweep()
"""

from ideagen.scheduling.clock import (
    Clock,
    LocalTime,
    format_time_left,
    is_valid_timezone,
    local_components,
    resolve_timezone,
    system_clock,
    to_instant,
)
from ideagen.scheduling.generators import HttpTradeIdeaGenerator
from ideagen.scheduling.intervals import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEZONE,
    INTERVAL_CHOICES,
    FixedPeriod,
    IntervalSpec,
    Recurrence,
    TimeOfDay,
    describe_interval,
    interval_spec_from_settings,
    validate_interval_settings,
)
from ideagen.scheduling.lock_manager import LockManager
from ideagen.scheduling.models import (
    UNSET,
    AutoGenerationStatus,
    ScheduleCreate,
    ScheduleRecord,
    ScheduleUpdate,
)
from ideagen.scheduling.orchestrator import (
    AttemptState,
    GenerationOrchestrator,
    OutcomeCode,
    RunOutcome,
)
from ideagen.scheduling.protocol import GenerationResult, Notifier, TradeIdeaGenerator
from ideagen.scheduling.repository import ScheduleRepository
from ideagen.scheduling.retry import FailureDecision, RetryPolicy
from ideagen.scheduling.service import AutoGenerationService
from ideagen.scheduling.sweep import SweepResult, SweepRunner
from ideagen.scheduling.triggers import compute_next_trigger

__all__ = [
    # Clock
    "Clock",
    "LocalTime",
    "format_time_left",
    "is_valid_timezone",
    "local_components",
    "resolve_timezone",
    "system_clock",
    "to_instant",
    # Intervals
    "DEFAULT_INTERVAL",
    "DEFAULT_TIMEZONE",
    "INTERVAL_CHOICES",
    "FixedPeriod",
    "IntervalSpec",
    "Recurrence",
    "TimeOfDay",
    "describe_interval",
    "interval_spec_from_settings",
    "validate_interval_settings",
    # Triggers / retry
    "compute_next_trigger",
    "FailureDecision",
    "RetryPolicy",
    # Models / store
    "UNSET",
    "AutoGenerationStatus",
    "ScheduleCreate",
    "ScheduleRecord",
    "ScheduleRepository",
    "ScheduleUpdate",
    "LockManager",
    # Orchestration
    "AttemptState",
    "GenerationOrchestrator",
    "GenerationResult",
    "HttpTradeIdeaGenerator",
    "Notifier",
    "OutcomeCode",
    "RunOutcome",
    "TradeIdeaGenerator",
    "SweepResult",
    "SweepRunner",
    "AutoGenerationService",
]
