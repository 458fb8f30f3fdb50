"""Email (SMTP) notification channel."""

from __future__ import annotations

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from ideagen.core.errors import NotificationError
from ideagen.notifications.base import BaseChannel
from ideagen.notifications.events import NotificationEvent
from ideagen.notifications.protocol import ChannelType, DeliveryResult
from ideagen.notifications.templates import render_html, render_text


class EmailChannel(BaseChannel):
    """
    Email channel using SMTP.

    The recipient is the address stored on the user's schedule
    (``event.email``); events without one are not sent.
    """

    def __init__(
        self,
        smtp_host: str,
        from_address: str,
        *,
        name: str = "email",
        smtp_port: int = 587,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        use_tls: bool = True,
        app_url: str = "http://localhost:3000",
        timeout: float = 30.0,
        **kwargs: Any,
    ):
        super().__init__(name, ChannelType.EMAIL, **kwargs)
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._from_address = from_address
        self._use_tls = use_tls
        self._app_url = app_url
        self._timeout = timeout

    def should_send(self, event: NotificationEvent) -> bool:
        return bool(event.email) and super().should_send(event)

    def build_message(self, event: NotificationEvent) -> str:
        """Build the MIME message (plain text + HTML)."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = event.title
        msg["From"] = self._from_address
        msg["To"] = event.email or ""
        msg.attach(MIMEText(render_text(event, self._app_url), "plain"))
        msg.attach(MIMEText(render_html(event, self._app_url), "html"))
        return msg.as_string()

    def _deliver(self, event: NotificationEvent) -> None:
        with smtplib.SMTP(self._smtp_host, self._smtp_port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._smtp_user and self._smtp_password:
                server.login(self._smtp_user, self._smtp_password)
            server.sendmail(self._from_address, [event.email], self.build_message(event))

    async def send(self, event: NotificationEvent) -> DeliveryResult:
        """Send the event via email (blocking SMTP runs in a worker thread)."""
        if not event.email:
            return DeliveryResult.fail(self._name, NotificationError("No email address for user"))
        try:
            await asyncio.to_thread(self._deliver, event)
        except (smtplib.SMTPException, OSError) as e:
            return DeliveryResult.fail(
                self._name, NotificationError(str(e), cause=e).with_context(channel=self._name)
            )
        return DeliveryResult.ok(self._name, response={"to": event.email})
