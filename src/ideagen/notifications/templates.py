"""HTML and plain-text email bodies, one panel per event kind."""

from __future__ import annotations

from html import escape

from ideagen.notifications.events import EventKind, NotificationEvent

BRAND = "ideagen"
TAGLINE = "AI-Powered FX Trading Assistant"

_PANELS = {
    EventKind.SUCCESS: (
        "#d4edda",
        "#c3e6cb",
        "#155724",
        "New Trade Idea Generated Successfully!",
        "A new AI-generated trade idea is now available in your dashboard.",
    ),
    EventKind.RETRY: (
        "#fff3cd",
        "#ffeaa7",
        "#856404",
        "Retry in Progress",
        "We're retrying the auto-generation process. You'll be notified once it's complete.",
    ),
    EventKind.FAILURE: (
        "#f8d7da",
        "#f5c6cb",
        "#721c24",
        "Auto-Generation Failed",
        "We couldn't generate your trade idea. Your regular schedule continues with the next interval.",
    ),
}

_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; border-radius: 10px 10px 0 0; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 24px;">{brand}</h1>
    <p style="color: #e0e0e0; margin: 10px 0 0 0;">{tagline}</p>
  </div>
  <div style="background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px; border: 1px solid #e9ecef;">
    <h2 style="color: #2c3e50; margin-top: 0;">{title}</h2>
    <p style="font-size: 16px; margin-bottom: 20px;">{message}</p>
    {panel}
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #dee2e6; text-align: center;">
      <p style="color: #6c757d; font-size: 14px; margin: 0;">
        This is an automated notification from {brand}.<br>
        You can manage your notification preferences in your account settings.
      </p>
    </div>
  </div>
</body>
</html>
"""

_PANEL = """<div style="background: {bg}; border: 1px solid {border}; border-radius: 5px; padding: 15px; margin: 20px 0;">
      <p style="margin: 0; color: {fg}; font-weight: bold;">{heading}</p>
      <p style="margin: 10px 0 0 0; color: {fg};">{body}</p>
    </div>"""

_BUTTON = """
    <div style="text-align: center; margin: 20px 0;">
      <a href="{url}/dashboard" style="background: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">
        View Trade Ideas
      </a>
    </div>"""


def render_html(event: NotificationEvent, app_url: str = "http://localhost:3000") -> str:
    """Render the HTML email body for ``event``."""
    bg, border, fg, heading, body = _PANELS[event.kind]
    panel = _PANEL.format(bg=bg, border=border, fg=fg, heading=heading, body=body)
    if event.kind is EventKind.SUCCESS:
        panel += _BUTTON.format(url=escape(app_url.rstrip("/"), quote=True))

    return _PAGE.format(
        title=escape(event.title),
        message=escape(event.message),
        brand=BRAND,
        tagline=TAGLINE,
        panel=panel,
    )


def render_text(event: NotificationEvent, app_url: str = "http://localhost:3000") -> str:
    """Plain-text alternative part."""
    lines = [event.title, "", event.message]
    if event.kind is EventKind.SUCCESS:
        lines += ["", f"View trade ideas: {app_url.rstrip('/')}/dashboard"]
    return "\n".join(lines) + "\n"
