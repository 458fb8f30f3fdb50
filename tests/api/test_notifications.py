"""Tests for the notification inbox endpoints."""

from __future__ import annotations

import pytest

from ideagen.notifications.events import final_failure_event, success_event
from ideagen.notifications.store import NotificationRepository

BASE = "/api/v1/users/u-1/notifications"


@pytest.fixture
def seeded(conn):
    store = NotificationRepository(conn)
    first = store.add(success_event("u-1", {"direction": "SELL", "confidence": 0.8}))
    second = store.add(final_failure_event("u-1", 2, "boom"))
    store.add(success_event("u-2", None))
    return first, second


class TestInbox:
    def test_list(self, client, seeded):
        resp = client.get(BASE)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["unread"] == 2
        assert len(data["items"]) == 2
        assert {item["type"] for item in data["items"]} == {
            "auto_generation_success",
            "auto_generation_error",
        }

    def test_limit_validated(self, client):
        assert client.get(BASE, params={"limit": 0}).status_code == 422

    def test_mark_read(self, client, seeded):
        first, _ = seeded
        resp = client.post(f"{BASE}/{first.id}/read")
        assert resp.status_code == 200
        assert resp.json()["data"] == {"id": first.id, "read": True}

        unread = client.get(BASE, params={"unread_only": True}).json()["data"]
        assert unread["unread"] == 1
        assert [item["id"] for item in unread["items"]] == [seeded[1].id]

    def test_mark_read_other_user(self, client, seeded):
        first, _ = seeded
        resp = client.post(f"/api/v1/users/u-2/notifications/{first.id}/read")
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    def test_delete(self, client, seeded):
        _, second = seeded
        assert client.delete(f"{BASE}/{second.id}").status_code == 200
        assert client.delete(f"{BASE}/{second.id}").status_code == 404

    def test_clear(self, client, seeded):
        resp = client.delete(BASE)
        assert resp.status_code == 200
        assert resp.json()["data"] == {"deleted": 2}
        assert client.get("/api/v1/users/u-2/notifications").json()["data"]["unread"] == 1
