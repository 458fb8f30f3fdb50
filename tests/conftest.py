"""
Shared pytest fixtures for ideagen tests.

- ``conn``: in-memory SQLite with the schema applied
- ``clock``: a :class:`FakeClock` pinned to 2026-01-15 07:00 UTC
- ``generator`` / ``notifier``: fakes recording every call
- ``service``: an :class:`AutoGenerationService` wired from the above
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from ideagen.core.schema import open_database
from ideagen.scheduling.service import AutoGenerationService
from tests._support.fakes import FakeClock, FakeGenerator, RecordingNotifier


@pytest.fixture
def conn():
    connection = open_database(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 7, 0, tzinfo=UTC))


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(conn, generator, notifier, clock):
    return AutoGenerationService(conn, generator, notifier, clock=clock)
