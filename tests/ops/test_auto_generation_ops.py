"""Tests for auto-generation operations."""

import asyncio
from datetime import UTC, datetime

import pytest

from ideagen.core.settings import IdeagenSettings
from ideagen.ops.auto_generation import (
    get_auto_generation_status,
    pause_auto_generation,
    process_due_schedules,
    resume_auto_generation,
    trigger_auto_generation,
    update_auto_generation_settings,
)
from ideagen.ops.context import OperationContext
from ideagen.ops.requests import UpdateAutoGenerationRequest
from ideagen.scheduling.protocol import GenerationResult
from ideagen.scheduling.service import AutoGenerationService
from tests._support.fakes import FakeGenerator


def _run(coro):
    """Run async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def ctx(conn, service):
    return OperationContext(conn=conn, settings=IdeagenSettings(), caller="test", scheduler=service)


def _daily(user_id="u-1", **kwargs):
    base = dict(user_id=user_id, interval="daily", time="09:00", timezone="Europe/Zurich")
    base.update(kwargs)
    return UpdateAutoGenerationRequest(**base)


# ── Settings ────────────────────────────────────────────────────────


class TestUpdateSettings:
    def test_enable(self, ctx):
        result = update_auto_generation_settings(ctx, _daily())
        assert result.success
        assert result.data.enabled
        assert result.data.next_generation == datetime(2026, 1, 15, 8, 0, tzinfo=UTC)

    def test_disable(self, ctx):
        update_auto_generation_settings(ctx, _daily())
        result = update_auto_generation_settings(ctx, _daily(enabled=False))
        assert result.success
        assert not result.data.enabled

    def test_invalid_interval(self, ctx):
        result = update_auto_generation_settings(ctx, _daily(interval="fortnightly"))
        assert not result.success
        assert result.error.code == "INVALID_SCHEDULE"
        assert result.error.details["field"] == "interval"

    def test_invalid_timezone(self, ctx):
        result = update_auto_generation_settings(ctx, _daily(timezone="Moon/Base"))
        assert result.error.code == "INVALID_SCHEDULE"

    def test_missing_user(self, ctx):
        result = update_auto_generation_settings(ctx, _daily(user_id=""))
        assert result.error.code == "VALIDATION_FAILED"


class TestStatusAndPause:
    def test_status_without_schedule(self, ctx):
        result = get_auto_generation_status(ctx, "u-1")
        assert result.success
        assert not result.data.enabled

    def test_pause_and_resume(self, ctx):
        update_auto_generation_settings(ctx, _daily())
        paused = pause_auto_generation(ctx, "u-1")
        assert paused.data.paused
        resumed = resume_auto_generation(ctx, "u-1")
        assert not resumed.data.paused
        assert resumed.data.next_generation == paused.data.next_generation

    def test_pause_without_schedule(self, ctx):
        result = pause_auto_generation(ctx, "u-1")
        assert result.error.code == "NOT_ENABLED"


# ── Runs ────────────────────────────────────────────────────────────


class TestTrigger:
    def test_success(self, ctx):
        update_auto_generation_settings(ctx, _daily())
        result = _run(trigger_auto_generation(ctx, "u-1"))
        assert result.success
        assert result.data.success

    def test_not_enabled(self, ctx):
        result = _run(trigger_auto_generation(ctx, "u-1"))
        assert not result.success
        assert result.error.code == "NOT_ENABLED"
        assert result.metadata["outcome"]["code"] == "NOT_ENABLED"

    def test_paused(self, ctx):
        update_auto_generation_settings(ctx, _daily(paused=True))
        result = _run(trigger_auto_generation(ctx, "u-1"))
        assert result.error.code == "PAUSED"

    def test_generation_failure(self, conn, clock):
        service = AutoGenerationService(conn, FakeGenerator(GenerationResult.fail("limit")), clock=clock)
        ctx = OperationContext(conn=conn, settings=IdeagenSettings(), scheduler=service)
        update_auto_generation_settings(ctx, _daily())

        result = _run(trigger_auto_generation(ctx, "u-1"))

        assert result.error.code == "GENERATION_FAILED"
        assert result.error.retryable
        assert result.metadata["outcome"]["retry_count"] == 1

    def test_generator_not_configured(self, conn):
        ctx = OperationContext(conn=conn, settings=IdeagenSettings(generator_url=None))
        result = _run(trigger_auto_generation(ctx, "u-1"))
        assert result.error.code == "CONFIG_ERROR"


class TestProcessDueSchedules:
    def test_sweep(self, ctx, clock):
        update_auto_generation_settings(ctx, _daily())
        update_auto_generation_settings(ctx, _daily("u-2", interval="hourly", time=None))
        clock.advance(hours=2)

        result = _run(process_due_schedules(ctx))

        assert result.success
        assert result.data.processed == 2

    def test_query_failure(self, ctx, conn):
        conn.execute("DROP TABLE auto_generation_schedules")
        result = _run(process_due_schedules(ctx))
        assert result.error.code == "PERSISTENCE_FAILED"

    def test_generator_not_configured(self, conn):
        ctx = OperationContext(conn=conn, settings=IdeagenSettings(generator_url=None))
        result = _run(process_due_schedules(ctx))
        assert result.error.code == "CONFIG_ERROR"
