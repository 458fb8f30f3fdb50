"""Collaborator protocols for the orchestrator.

The orchestrator talks to two opaque collaborators:

    TradeIdeaGenerator.generate(user_id) -> GenerationResult
        May fail for business reasons (weekly quota reached) or transient
        ones (upstream down).  Both are treated as a generation failure.

    Notifier.notify(event) -> None
        Fire-and-forget from the orchestrator's point of view; a failing
        notifier never fails the attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ideagen.notifications.events import NotificationEvent


@dataclass(frozen=True)
class GenerationResult:
    """Result of one generator call."""

    success: bool
    idea: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def ok(cls, idea: dict[str, Any] | None = None) -> GenerationResult:
        return cls(success=True, idea=dict(idea or {}))

    @classmethod
    def fail(cls, error: str) -> GenerationResult:
        return cls(success=False, error=error or "Unknown error")


@runtime_checkable
class TradeIdeaGenerator(Protocol):
    """Generates one trade idea for a user."""

    async def generate(self, user_id: str) -> GenerationResult: ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers a notification event to the user."""

    async def notify(self, event: NotificationEvent) -> None: ...
