"""Auto-generation service: wires store, lease, retry policy, orchestrator
and sweep runner over one database connection.

┌──────────────────────────────────────────────────────────────────────┐
│  AutoGenerationService                                               │
│                                                                      │
│   ScheduleRepository ──┐                                             │
│   LockManager ─────────┼──► GenerationOrchestrator ──► SweepRunner   │
│   RetryPolicy ─────────┤          │                                  │
│   TradeIdeaGenerator ──┤          ▼                                  │
│   Notifier ────────────┘   run_for_user / configure / set_paused     │
└──────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from ideagen.core.settings import IdeagenSettings
from ideagen.core.sqlite_conn import Connection
from ideagen.notifications.dispatcher import create_dispatcher
from ideagen.scheduling.clock import Clock, system_clock
from ideagen.scheduling.generators import HttpTradeIdeaGenerator
from ideagen.scheduling.lock_manager import LockManager
from ideagen.scheduling.models import AutoGenerationStatus, ScheduleRecord
from ideagen.scheduling.orchestrator import GenerationOrchestrator, RunOutcome
from ideagen.scheduling.protocol import Notifier, TradeIdeaGenerator
from ideagen.scheduling.repository import ScheduleRepository
from ideagen.scheduling.retry import RetryPolicy
from ideagen.scheduling.sweep import SweepResult, SweepRunner


class AutoGenerationService:
    """Facade used by the ops layer, CLI and API.

    Example:
        >>> service = AutoGenerationService(conn, generator=my_generator)
        >>> service.configure("u-1", interval="daily", time="09:00", timezone="Europe/Zurich")
        >>> await service.sweep()
    """

    def __init__(
        self,
        conn: Connection,
        generator: TradeIdeaGenerator,
        notifier: Notifier | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        instance_id: str | None = None,
        lock_ttl_seconds: int = 300,
        clock: Clock = system_clock,
    ) -> None:
        self.conn = conn
        self.repository = ScheduleRepository(conn)
        self.lock_manager = LockManager(conn, instance_id=instance_id, ttl_seconds=lock_ttl_seconds)
        self.orchestrator = GenerationOrchestrator(
            repository=self.repository,
            generator=generator,
            notifier=notifier,
            retry_policy=retry_policy,
            lock_manager=self.lock_manager,
            clock=clock,
        )
        self.runner = SweepRunner(
            self.repository, self.orchestrator, self.lock_manager, clock=clock
        )

    @classmethod
    def from_settings(
        cls,
        conn: Connection,
        settings: IdeagenSettings,
        *,
        generator: TradeIdeaGenerator | None = None,
        notifier: Notifier | None = None,
        clock: Clock = system_clock,
    ) -> AutoGenerationService:
        """Build the service from settings (HTTP generator + configured channels)."""
        return cls(
            conn,
            generator=generator or HttpTradeIdeaGenerator.from_settings(settings),
            notifier=notifier or create_dispatcher(conn, settings),
            retry_policy=RetryPolicy(settings.max_retries, settings.retry_delay),
            instance_id=settings.instance_id,
            lock_ttl_seconds=settings.lock_ttl_seconds,
            clock=clock,
        )

    async def run_for_user(self, user_id: str, *, due_only: bool = False) -> RunOutcome:
        return await self.orchestrator.run_for_user(user_id, due_only=due_only)

    async def sweep(self) -> SweepResult:
        return await self.runner.sweep()

    def configure(self, user_id: str, **settings) -> ScheduleRecord | None:
        return self.orchestrator.configure(user_id, **settings)

    def set_paused(self, user_id: str, paused: bool) -> ScheduleRecord:
        return self.orchestrator.set_paused(user_id, paused)

    def get_status(self, user_id: str) -> AutoGenerationStatus:
        return self.orchestrator.get_status(user_id)
