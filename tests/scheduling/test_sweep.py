"""Tests for SweepRunner."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ideagen.core.errors import PersistenceError
from ideagen.scheduling.lock_manager import LockManager
from ideagen.scheduling.orchestrator import OutcomeCode, RunOutcome
from ideagen.scheduling.protocol import GenerationResult
from ideagen.scheduling.repository import ScheduleRepository
from ideagen.scheduling.service import AutoGenerationService
from ideagen.scheduling.sweep import SweepRunner


def _run(coro):
    """Run async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class SelectiveGenerator:
    """Raises for the listed users, succeeds for everyone else."""

    def __init__(self, *failing: str):
        self.failing = set(failing)
        self.calls: list[str] = []

    async def generate(self, user_id):
        self.calls.append(user_id)
        if user_id in self.failing:
            raise RuntimeError(f"upstream error for {user_id}")
        return GenerationResult.ok({"direction": "BUY"})


def _schedule_users(service, clock, *user_ids):
    for user_id in user_ids:
        service.configure(user_id, interval="hourly")
    clock.advance(hours=2)


class TestSweep:
    def test_nothing_due(self, service):
        result = _run(service.sweep())
        assert (result.processed, result.errors, result.skipped, result.due) == (0, 0, 0, 0)

    def test_processes_due_schedules(self, service, clock, generator):
        _schedule_users(service, clock, "u-1", "u-2")
        result = _run(service.sweep())
        assert result.processed == 2
        assert sorted(generator.calls) == ["u-1", "u-2"]

    def test_not_yet_due_is_left_alone(self, service, clock, generator):
        service.configure("u-1", interval="hourly")
        clock.advance(minutes=30)
        result = _run(service.sweep())
        assert result.due == 0
        assert generator.calls == []

    def test_one_failing_user_does_not_stop_the_rest(self, conn, clock):
        service = AutoGenerationService(conn, SelectiveGenerator("u-2"), clock=clock)
        _schedule_users(service, clock, "u-1", "u-2", "u-3")

        result = _run(service.sweep())

        assert result.processed == 2
        assert result.errors == 1
        assert result.failures == [{"user_id": "u-2", "error": "upstream error for u-2"}]
        for user_id in ("u-1", "u-2", "u-3"):
            record = service.repository.get_active(user_id)
            assert record.next_trigger > clock.now
        assert service.repository.get_active("u-2").retry_count == 1

    def test_paused_schedules_are_not_due(self, service, clock, generator):
        _schedule_users(service, clock, "u-1", "u-2")
        service.set_paused("u-2", True)

        result = _run(service.sweep())

        assert result.due == 1
        assert generator.calls == ["u-1"]

    def test_locked_user_counts_as_skipped(self, service, clock, conn):
        _schedule_users(service, clock, "u-1", "u-2")
        LockManager(conn, instance_id="other-sweep").acquire("u-1")

        result = _run(service.sweep())

        assert result.processed == 1
        assert result.skipped == 1
        assert result.errors == 0

    def test_stale_due_row_is_rechecked_under_lease(self, service, clock, generator):
        _schedule_users(service, clock, "u-1")
        stale = service.repository.query_due(clock.now)
        # A manual run lands between the due query and the sweep's own run
        _run(service.run_for_user("u-1"))

        with patch.object(service.repository, "query_due", return_value=stale):
            result = _run(service.sweep())

        assert result.due == 1
        assert result.skipped == 1
        assert result.processed == 0
        assert generator.calls == ["u-1"]

    def test_second_sweep_finds_nothing(self, service, clock, generator):
        _schedule_users(service, clock, "u-1")
        _run(service.sweep())
        result = _run(service.sweep())
        assert result.due == 0
        assert generator.calls == ["u-1"]

    def test_retry_becomes_due_after_delay(self, conn, clock):
        service = AutoGenerationService(conn, SelectiveGenerator("u-1"), clock=clock)
        _schedule_users(service, clock, "u-1")
        _run(service.sweep())

        clock.advance(minutes=59)
        assert _run(service.sweep()).due == 0
        clock.advance(minutes=1)
        assert _run(service.sweep()).due == 1

    def test_to_dict(self, service, clock):
        _schedule_users(service, clock, "u-1")
        payload = _run(service.sweep()).to_dict()
        assert payload["processed"] == 1
        assert payload["duration_ms"] >= 0
        assert payload["started_at"] is not None


class TestSweepIsolation:
    def _runner(self, records, outcomes, clock):
        repository = MagicMock(spec=ScheduleRepository)
        repository.query_due.return_value = records
        orchestrator = MagicMock()
        orchestrator.run_for_user = AsyncMock(side_effect=outcomes)
        return SweepRunner(repository, orchestrator, clock=clock), orchestrator

    def test_persistence_error_for_one_user(self, clock):
        records = [MagicMock(user_id=u) for u in ("u-1", "u-2", "u-3")]
        outcomes = [
            RunOutcome(user_id="u-1", success=True),
            PersistenceError("disk I/O error"),
            RunOutcome(user_id="u-3", success=True),
        ]
        runner, orchestrator = self._runner(records, outcomes, clock)

        result = _run(runner.sweep())

        assert result.processed == 2
        assert result.errors == 1
        assert orchestrator.run_for_user.await_count == 3

    def test_skip_outcomes(self, clock):
        records = [MagicMock(user_id=u) for u in ("u-1", "u-2", "u-3")]
        outcomes = [
            RunOutcome.skip("u-1", OutcomeCode.PAUSED, "paused"),
            RunOutcome.skip("u-2", OutcomeCode.NOT_ENABLED, "not enabled"),
            RunOutcome.skip("u-3", OutcomeCode.NOT_DUE, "not due"),
        ]
        runner, _ = self._runner(records, outcomes, clock)

        result = _run(runner.sweep())

        assert result.skipped == 3
        assert result.processed == 0

    def test_query_failure_propagates(self, clock):
        repository = MagicMock(spec=ScheduleRepository)
        repository.query_due.side_effect = PersistenceError("no such table")
        runner = SweepRunner(repository, MagicMock(), clock=clock)

        with pytest.raises(PersistenceError):
            _run(runner.sweep())

    def test_sweep_uses_clock(self, clock):
        runner, _ = self._runner([], [], clock)
        result = _run(runner.sweep())
        assert result.started_at == clock.now
        assert result.duration_ms == 0
        runner.repository.query_due.assert_called_once_with(clock.now)
        assert result.finished_at - result.started_at == timedelta(0)
