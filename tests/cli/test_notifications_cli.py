"""Tests for ``ideagen notifications`` CLI commands."""

from __future__ import annotations

from datetime import timedelta

import pytest
from typer.testing import CliRunner

from ideagen.cli.notifications import app
from ideagen.core.schema import open_database
from ideagen.notifications.events import retry_event, success_event
from ideagen.notifications.store import NotificationRepository

runner = CliRunner()


@pytest.fixture
def db(tmp_path):
    path = str(tmp_path / "cli.db")
    conn = open_database(path)
    store = NotificationRepository(conn)
    ids = [
        store.add(success_event("u-1", {"direction": "BUY"})).id,
        store.add(retry_event("u-1", 1, 2, timedelta(hours=1), "boom")).id,
    ]
    conn.close()
    return path, ids


class TestNotificationsCli:
    def test_list_json(self, db):
        path, _ = db
        result = runner.invoke(app, ["list", "u-1", "-d", path, "--json"])
        assert result.exit_code == 0, result.output
        assert '"unread": 2' in result.output
        assert "auto_generation_retry" in result.output

    def test_list_empty(self, db):
        path, _ = db
        result = runner.invoke(app, ["list", "nobody", "-d", path])
        assert result.exit_code == 0
        assert "No notifications" in result.output

    def test_read_and_delete(self, db):
        path, ids = db
        assert runner.invoke(app, ["read", "u-1", ids[0], "-d", path]).exit_code == 0
        assert runner.invoke(app, ["delete", "u-1", ids[1], "-d", path]).exit_code == 0

        result = runner.invoke(app, ["list", "u-1", "-d", path, "--json"])
        assert '"unread": 0' in result.output

    def test_read_missing(self, db):
        path, _ = db
        result = runner.invoke(app, ["read", "u-1", "nope", "-d", path])
        assert result.exit_code == 1

    def test_clear(self, db):
        path, _ = db
        result = runner.invoke(app, ["clear", "u-1", "-d", path, "--yes"])
        assert result.exit_code == 0
        assert "Deleted 2 notification(s)" in result.output

    def test_clear_aborts_without_confirmation(self, db):
        path, _ = db
        result = runner.invoke(app, ["clear", "u-1", "-d", path], input="n\n")
        assert result.exit_code == 1
