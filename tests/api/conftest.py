"""API test fixtures: the app wired to the shared in-memory database."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ideagen.api import create_app
from ideagen.api.deps import get_connection, get_scheduler
from ideagen.core.settings import IdeagenSettings

CRON_SECRET = "s3cret"


@pytest.fixture
def settings(tmp_path):
    return IdeagenSettings(database_path=str(tmp_path / "api.db"), cron_secret=CRON_SECRET)


@pytest.fixture
def app(settings, conn, service):
    application = create_app(settings)
    application.dependency_overrides[get_connection] = lambda: conn
    application.dependency_overrides[get_scheduler] = lambda: service
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {CRON_SECRET}"}
