"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the database connection, settings, caller
identity and, optionally, a pre-built :class:`AutoGenerationService`
(tests and the API inject one; otherwise it is built from settings on
first use).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from ideagen.core.settings import IdeagenSettings, get_settings
from ideagen.core.sqlite_conn import Connection
from ideagen.scheduling.service import AutoGenerationService


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        conn: Database connection satisfying :class:`Connection`.
        settings: Runtime settings (defaults to :func:`get_settings`).
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request: ``"api"``, ``"cli"``, ``"cron"`` or ``"sdk"``.
        scheduler: Pre-built service; built lazily when ``None``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    conn: Connection
    settings: IdeagenSettings = field(default_factory=get_settings)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    scheduler: AutoGenerationService | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def get_scheduler(self) -> AutoGenerationService:
        if self.scheduler is None:
            self.scheduler = AutoGenerationService.from_settings(self.conn, self.settings)
        return self.scheduler

    @property
    def generator_configured(self) -> bool:
        """True when runs can reach a generator (injected or via ``generator_url``)."""
        return self.scheduler is not None or bool(self.settings.generator_url)
