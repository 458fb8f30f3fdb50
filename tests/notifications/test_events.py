"""Tests for notification event builders."""

from datetime import timedelta

import pytest

from ideagen.notifications.events import (
    EventKind,
    describe_delay,
    final_failure_event,
    retry_event,
    success_event,
)


class TestSuccessEvent:
    def test_message(self):
        event = success_event("u-1", {"direction": "BUY", "currency_pair": "GBP/USD", "confidence": 81.4})
        assert event.kind is EventKind.SUCCESS
        assert event.title == "New Trade Idea Generated"
        assert event.message == "BUY GBP/USD with 81% confidence"

    def test_defaults_for_missing_fields(self):
        event = success_event("u-1", {})
        assert event.message == "N/A USD/CHF with 0% confidence"
        assert event.metadata["direction"] == "N/A"
        assert event.metadata["currency_pair"] == "USD/CHF"
        assert event.metadata["confidence"] == 0

    def test_none_idea(self):
        assert success_event("u-1", None).message == "N/A USD/CHF with 0% confidence"

    @pytest.mark.parametrize(
        "confidence, shown",
        [(64.5, "65"), (64.49, "64"), ("70", "70"), ("high", "0"), ("inf", "0"), ("-inf", "0"), ("nan", "0")],
    )
    def test_confidence_rounding(self, confidence, shown):
        event = success_event("u-1", {"direction": "SELL", "pair": "EUR/CHF", "confidence": confidence})
        assert event.message == f"SELL EUR/CHF with {shown}% confidence"

    def test_to_dict(self):
        payload = success_event("u-1", {"id": "idea-1"}).to_dict()
        assert payload["type"] == "auto_generation_success"
        assert payload["metadata"]["trade_idea_id"] == "idea-1"


class TestFailureEvents:
    def test_retry(self):
        event = retry_event("u-1", 1, 2, timedelta(hours=1), "boom")
        assert event.kind is EventKind.RETRY
        assert event.message == "Auto-generation failed but will retry in 1 hour. (Attempt 1/2)"
        assert event.metadata == {"attempt": 1, "max_retries": 2, "error": "boom"}

    def test_final(self):
        event = final_failure_event("u-1", 2, "boom")
        assert event.kind.value == "auto_generation_error"
        assert event.message == (
            "Auto-generation failed after 2 retries. Next attempt scheduled for the next interval."
        )

    @pytest.mark.parametrize(
        "delay, text",
        [
            (timedelta(hours=1), "1 hour"),
            (timedelta(hours=3), "3 hours"),
            (timedelta(minutes=1), "1 minute"),
            (timedelta(minutes=45), "45 minutes"),
            (timedelta(seconds=90), "90 seconds"),
        ],
    )
    def test_describe_delay(self, delay, text):
        assert describe_delay(delay) == text
