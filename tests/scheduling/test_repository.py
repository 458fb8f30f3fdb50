"""Tests for ScheduleRepository."""

from datetime import UTC, datetime, timedelta

import pytest

from ideagen.core.errors import ConcurrencyConflictError, PersistenceError
from ideagen.scheduling.models import ScheduleCreate, ScheduleUpdate
from ideagen.scheduling.repository import ScheduleRepository

NOW = datetime(2026, 1, 15, 7, 0, tzinfo=UTC)


@pytest.fixture
def repository(conn):
    return ScheduleRepository(conn)


def _create(user_id="u-1", next_trigger=NOW, **overrides):
    base = dict(
        user_id=user_id,
        interval_type="daily",
        next_trigger=next_trigger,
        scheduled_time="09:00",
        timezone="Europe/Zurich",
    )
    base.update(overrides)
    return ScheduleCreate(**base)


class TestReplaceActive:
    def test_creates_active_record(self, repository):
        record = repository.replace_active(_create(notification_email="a@example.com"))
        assert record.id
        assert record.enabled and not record.paused
        assert record.version == 1
        assert record.retry_count == 0
        assert record.next_trigger == NOW
        assert record.notification_email == "a@example.com"

    def test_at_most_one_active_per_user(self, repository):
        first = repository.replace_active(_create())
        second = repository.replace_active(_create(interval_type="hourly"))

        active = repository.get_active("u-1")
        assert active.id == second.id
        assert repository.get(first.id).enabled is False
        assert len(repository.list_for_user("u-1")) == 2
        assert repository.count_active() == 1

    def test_other_users_untouched(self, repository):
        repository.replace_active(_create("u-1"))
        repository.replace_active(_create("u-2"))
        assert repository.count_active() == 2


class TestQueries:
    def test_get_missing(self, repository):
        assert repository.get("nope") is None
        assert repository.get_active("nobody") is None

    def test_query_due(self, repository):
        repository.replace_active(_create("due", NOW - timedelta(minutes=1)))
        repository.replace_active(_create("exact", NOW))
        repository.replace_active(_create("later", NOW + timedelta(minutes=1)))
        repository.replace_active(_create("paused", NOW - timedelta(hours=1), paused=True))

        due = {r.user_id for r in repository.query_due(NOW)}
        assert due == {"due", "exact"}

    def test_query_due_excludes_retired(self, repository):
        repository.replace_active(_create("u-1", NOW - timedelta(hours=1)))
        repository.deactivate_user("u-1")
        assert repository.query_due(NOW) == []

    def test_deactivate_keeps_next_trigger(self, repository):
        record = repository.replace_active(_create())
        assert repository.deactivate_user("u-1") == 1
        retired = repository.get(record.id)
        assert not retired.enabled
        assert retired.next_trigger == NOW
        assert repository.deactivate_user("u-1") == 0


class TestApplyUpdate:
    def test_writes_and_bumps_version(self, repository):
        record = repository.replace_active(_create())
        stored = repository.apply_update(
            record, ScheduleUpdate(retry_count=1, last_error="boom", next_trigger=NOW + timedelta(hours=1))
        )
        assert stored.retry_count == 1
        assert stored.last_error == "boom"
        assert stored.next_trigger == NOW + timedelta(hours=1)
        assert stored.version == 2

    def test_none_clears_column(self, repository):
        record = repository.replace_active(_create())
        record = repository.apply_update(record, ScheduleUpdate(last_error="boom"))
        record = repository.apply_update(record, ScheduleUpdate(last_error=None))
        assert record.last_error is None

    def test_empty_update_is_noop(self, repository):
        record = repository.replace_active(_create())
        assert repository.apply_update(record, ScheduleUpdate()).version == 1

    def test_stale_version_conflicts(self, repository):
        record = repository.replace_active(_create())
        repository.apply_update(record, ScheduleUpdate(paused=True))

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            repository.apply_update(record, ScheduleUpdate(retry_count=1))
        assert exc_info.value.expected_version == 1
        assert isinstance(exc_info.value, PersistenceError)
        assert repository.get(record.id).retry_count == 0

    def test_paused_maps_to_column(self, repository):
        record = repository.replace_active(_create())
        stored = repository.apply_update(record, ScheduleUpdate(paused=True))
        assert stored.paused
        assert repository.query_due(NOW) == []


class TestDriverErrors:
    def test_translated_to_persistence_error(self, conn, repository):
        conn.execute("DROP TABLE auto_generation_schedules")
        with pytest.raises(PersistenceError) as exc_info:
            repository.query_due(NOW)
        assert exc_info.value.context.operation == "query_due_schedules"
