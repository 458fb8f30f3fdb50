"""Tests for the clock and timezone resolver."""

from datetime import UTC, date, datetime, timedelta

import pytest

from ideagen.core.errors import InvalidScheduleConfigError
from ideagen.scheduling.clock import (
    format_time_left,
    is_valid_timezone,
    local_components,
    resolve_timezone,
    to_instant,
)


class TestResolveTimezone:
    def test_known_zone(self):
        assert resolve_timezone("Europe/Zurich").key == "Europe/Zurich"

    def test_unknown_zone_raises(self):
        with pytest.raises(InvalidScheduleConfigError) as exc_info:
            resolve_timezone("Mars/Olympus_Mons")
        assert exc_info.value.field_name == "timezone"

    def test_is_valid_timezone(self):
        assert is_valid_timezone("UTC")
        assert not is_valid_timezone("Not/AZone")


class TestLocalComponents:
    def test_winter_offset(self):
        local = local_components(datetime(2026, 1, 15, 7, 0, tzinfo=UTC), "Europe/Zurich")
        assert local.date == date(2026, 1, 15)
        assert (local.hour, local.minute) == (8, 0)
        assert local.weekday == 3  # Thursday

    def test_summer_offset(self):
        local = local_components(datetime(2026, 7, 1, 7, 0, tzinfo=UTC), "Europe/Zurich")
        assert local.hour == 9

    def test_date_rolls_over(self):
        local = local_components(datetime(2026, 1, 15, 23, 30, tzinfo=UTC), "Asia/Tokyo")
        assert local.date == date(2026, 1, 16)
        assert local.hour == 8

    def test_naive_input_is_utc(self):
        local = local_components(datetime(2026, 1, 15, 7, 0), "UTC")
        assert local.hour == 7


class TestToInstant:
    def test_regular_time(self):
        assert to_instant(date(2026, 1, 15), 9, 0, "Europe/Zurich") == datetime(
            2026, 1, 15, 8, 0, tzinfo=UTC
        )

    def test_nonexistent_time_lands_after_gap(self):
        # 02:30 does not exist on 2026-03-29 in Zurich; it resolves to 03:30 CEST
        instant = to_instant(date(2026, 3, 29), 2, 30, "Europe/Zurich")
        assert instant == datetime(2026, 3, 29, 1, 30, tzinfo=UTC)
        assert local_components(instant, "Europe/Zurich").hour == 3

    def test_repeated_time_takes_first_occurrence(self):
        # 02:30 happens twice on 2026-10-25; the CEST one comes first
        instant = to_instant(date(2026, 10, 25), 2, 30, "Europe/Zurich")
        assert instant == datetime(2026, 10, 25, 0, 30, tzinfo=UTC)


class TestFormatTimeLeft:
    @pytest.mark.parametrize(
        "remaining, expected",
        [
            (timedelta(days=1, hours=2, minutes=3, seconds=4), "1d 2h 3m"),
            (timedelta(hours=5, minutes=1, seconds=9), "5h 1m 9s"),
            (timedelta(minutes=5, seconds=7), "5m 7s"),
            (timedelta(seconds=42), "42s"),
            (timedelta(0), "Due now"),
            (timedelta(minutes=-3), "Due now"),
        ],
    )
    def test_rendering(self, remaining, expected):
        assert format_time_left(remaining) == expected
