"""Tests for RetryPolicy."""

from datetime import UTC, datetime, timedelta

import pytest

from ideagen.notifications.events import EventKind
from ideagen.scheduling.models import UNSET, ScheduleRecord
from ideagen.scheduling.retry import RetryPolicy

NOW = datetime(2026, 1, 15, 9, 0, tzinfo=UTC)  # 10:00 in Zurich


def _record(**overrides):
    base = dict(
        id="s-1",
        user_id="u-1",
        interval_type="daily",
        scheduled_time="09:00",
        timezone="Europe/Zurich",
        next_trigger=datetime(2026, 1, 15, 8, 0, tzinfo=UTC),
    )
    base.update(overrides)
    return ScheduleRecord(**base)


class TestOnSuccess:
    def test_resets_retry_state(self):
        update = RetryPolicy().on_success(_record(retry_count=2, last_error="boom"), NOW)
        assert update.retry_count == 0
        assert update.last_error is None
        assert update.last_triggered == NOW

    def test_next_trigger_from_completion_time(self):
        update = RetryPolicy().on_success(_record(), NOW)
        assert update.next_trigger == datetime(2026, 1, 16, 8, 0, tzinfo=UTC)

    def test_idempotent_on_clean_record(self):
        policy = RetryPolicy()
        first = policy.on_success(_record(), NOW)
        second = policy.on_success(first.apply_to(_record()), NOW)
        assert first.changes() == second.changes()

    def test_does_not_touch_pause_or_enabled(self):
        update = RetryPolicy().on_success(_record(), NOW)
        assert update.paused is UNSET
        assert update.enabled is UNSET


class TestOnFailure:
    def test_first_failure_schedules_retry(self):
        decision = RetryPolicy().on_failure(_record(), "quota reached", NOW)
        assert decision.will_retry
        assert decision.update.retry_count == 1
        assert decision.update.next_trigger == NOW + timedelta(hours=1)
        assert decision.update.last_error == "quota reached"
        assert decision.event.kind is EventKind.RETRY
        assert decision.event.message.endswith("(Attempt 1/2)")

    def test_retry_does_not_set_last_triggered(self):
        decision = RetryPolicy().on_failure(_record(), "boom", NOW)
        assert decision.update.last_triggered is UNSET

    def test_second_failure(self):
        decision = RetryPolicy().on_failure(_record(retry_count=1), "boom", NOW)
        assert decision.will_retry
        assert decision.update.retry_count == 2
        assert decision.event.message == (
            "Auto-generation failed but will retry in 1 hour. (Attempt 2/2)"
        )

    def test_retries_exhausted(self):
        decision = RetryPolicy().on_failure(_record(retry_count=2, last_error="boom"), "boom", NOW)
        assert not decision.will_retry
        assert decision.update.retry_count == 0
        assert decision.update.last_error is None
        assert decision.update.last_triggered == NOW
        assert decision.update.next_trigger == datetime(2026, 1, 16, 8, 0, tzinfo=UTC)
        assert decision.event.kind is EventKind.FAILURE
        assert decision.event.message == (
            "Auto-generation failed after 2 retries. Next attempt scheduled for the next interval."
        )

    def test_zero_retries_fails_immediately(self):
        decision = RetryPolicy(max_retries=0).on_failure(_record(), "boom", NOW)
        assert not decision.will_retry
        assert decision.update.retry_count == 0

    def test_custom_delay(self):
        policy = RetryPolicy(max_retries=3, retry_delay=timedelta(minutes=30))
        decision = policy.on_failure(_record(), "boom", NOW)
        assert decision.update.next_trigger == NOW + timedelta(minutes=30)
        assert "retry in 30 minutes" in decision.event.message
        assert decision.event.message.endswith("(Attempt 1/3)")


class TestValidation:
    def test_negative_retries(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)

    def test_non_positive_delay(self):
        with pytest.raises(ValueError):
            RetryPolicy(retry_delay=timedelta(0))
