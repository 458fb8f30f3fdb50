"""Tests for the concrete notification channels."""

import asyncio
import json
import smtplib
from unittest.mock import MagicMock, patch

import httpx
from rich.console import Console

from ideagen.core.errors import PersistenceError
from ideagen.notifications.channels import ConsoleChannel, EmailChannel, InboxChannel, WebhookChannel
from ideagen.notifications.events import final_failure_event, success_event
from ideagen.notifications.store import NotificationRepository
from ideagen.notifications.templates import render_html, render_text


def _run(coro):
    """Run async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _event(email=None):
    event = success_event("u-1", {"direction": "BUY", "currency_pair": "EUR/USD", "confidence": 66})
    event.email = email
    return event


# ── Inbox ───────────────────────────────────────────────────────────


class TestInboxChannel:
    def test_stores_event(self, conn):
        result = _run(InboxChannel(NotificationRepository(conn)).send(_event()))
        assert result.success
        assert result.response["id"]

    def test_store_failure_is_captured(self):
        store = MagicMock()
        store.add.side_effect = PersistenceError("database is locked")
        result = _run(InboxChannel(store).send(_event()))
        assert not result.success
        assert result.message == "database is locked"


# ── Email ───────────────────────────────────────────────────────────


class TestEmailChannel:
    def _channel(self, **kwargs):
        return EmailChannel(
            "smtp.test", "ideagen <noreply@test>", smtp_user="user", smtp_password="pw", **kwargs
        )

    def test_needs_recipient(self):
        channel = self._channel()
        assert not channel.should_send(_event())
        assert channel.should_send(_event("trader@example.com"))

    def test_build_message(self):
        message = self._channel(app_url="https://app.test").build_message(_event("trader@example.com"))
        assert "Subject: New Trade Idea Generated" in message
        assert "To: trader@example.com" in message
        assert "https://app.test/dashboard" in message

    @patch("ideagen.notifications.channels.email.smtplib.SMTP")
    def test_send(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value

        result = _run(self._channel().send(_event("trader@example.com")))

        assert result.success
        mock_smtp.assert_called_once_with("smtp.test", 587, timeout=30.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "pw")
        server.sendmail.assert_called_once()
        assert server.sendmail.call_args.args[1] == ["trader@example.com"]

    @patch("ideagen.notifications.channels.email.smtplib.SMTP")
    def test_smtp_failure_is_captured(self, mock_smtp):
        mock_smtp.side_effect = smtplib.SMTPConnectError(421, b"busy")
        result = _run(self._channel().send(_event("trader@example.com")))
        assert not result.success
        assert result.error is not None

    def test_send_without_address(self):
        result = _run(self._channel().send(_event()))
        assert not result.success


# ── Webhook ─────────────────────────────────────────────────────────


class TestWebhookChannel:
    def test_posts_event(self):
        seen = {}

        def handler(request):
            seen["payload"] = json.loads(request.content)
            seen["token"] = request.headers.get("X-Token")
            return httpx.Response(202)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        channel = WebhookChannel("https://push.test/hook", headers={"X-Token": "t"}, client=client)

        result = _run(channel.send(_event()))

        assert result.success
        assert result.response == {"status": 202}
        assert seen["payload"]["type"] == "auto_generation_success"
        assert seen["token"] == "t"

    def test_http_error_is_captured(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        result = _run(WebhookChannel("https://push.test/hook", client=client).send(_event()))
        assert not result.success


# ── Console ─────────────────────────────────────────────────────────


class TestConsoleChannel:
    def test_prints(self):
        console = Console(record=True, width=120)
        result = _run(ConsoleChannel(console=console).send(_event()))
        assert result.success
        assert "BUY EUR/USD with 66% confidence" in console.export_text()


# ── Templates ───────────────────────────────────────────────────────


class TestTemplates:
    def test_success_has_dashboard_link(self):
        html = render_html(_event(), "https://app.test/")
        assert 'href="https://app.test/dashboard"' in html
        assert "New Trade Idea Generated Successfully!" in html

    def test_failure_has_no_button(self):
        html = render_html(final_failure_event("u-1", 2, "boom"))
        assert "/dashboard" not in html
        assert "Auto-Generation Failed" in html

    def test_message_is_escaped(self):
        event = _event()
        event.message = "<script>alert(1)</script>"
        assert "<script>" not in render_html(event)

    def test_plain_text(self):
        text = render_text(_event(), "https://app.test")
        assert text.splitlines()[0] == "New Trade Idea Generated"
        assert "https://app.test/dashboard" in text
