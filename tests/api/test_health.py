"""Tests for the health endpoint and middleware headers."""


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["service"] == "ideagen"

    def test_request_id_generated(self, client):
        resp = client.get("/health")
        assert resp.headers.get("X-Request-ID")
        assert "X-Process-Time-Ms" in resp.headers

    def test_request_id_echoed(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert resp.headers["X-Request-ID"] == "req-42"
