"""
CLI ``ideagen notifications``: a user's in-app notification inbox.
"""

from __future__ import annotations

import json

import typer

from ideagen.cli.utils import console, fail, make_context, output_result, print_table

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_notifications(
    user_id: str = typer.Argument(..., help="User ID"),
    limit: int = typer.Option(50, "--limit", "-n"),
    unread: bool = typer.Option(False, "--unread", help="Only unread notifications"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List notifications, newest first."""
    from ideagen.ops.notifications import list_notifications as _list
    from ideagen.ops.requests import ListNotificationsRequest

    ctx, _ = make_context(database)
    result = _list(ctx, ListNotificationsRequest(user_id=user_id, limit=limit, unread_only=unread))
    if not result.success:
        fail(result)

    inbox = result.data
    if json_out:
        payload = {
            "unread": inbox.unread,
            "items": [
                {
                    "id": n.id,
                    "type": n.type,
                    "title": n.title,
                    "message": n.message,
                    "read": n.read,
                    "created_at": n.created_at,
                }
                for n in inbox.items
            ],
        }
        console.print_json(json.dumps(payload, default=str))
        return

    if not inbox.items:
        console.print("[dim]No notifications.[/dim]")
        return
    print_table(
        inbox.items,
        title=f"Notifications ({inbox.unread} unread)",
        columns=["id", "type", "title", "message", "read", "created_at"],
    )


@app.command("read")
def mark_read(
    user_id: str = typer.Argument(..., help="User ID"),
    notification_id: str = typer.Argument(..., help="Notification ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Mark one notification as read."""
    from ideagen.ops.notifications import mark_notification_read
    from ideagen.ops.requests import NotificationRequest

    ctx, _ = make_context(database)
    result = mark_notification_read(
        ctx, NotificationRequest(user_id=user_id, notification_id=notification_id)
    )
    output_result(result, title="Marked as read")


@app.command("delete")
def delete(
    user_id: str = typer.Argument(..., help="User ID"),
    notification_id: str = typer.Argument(..., help="Notification ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Delete one notification."""
    from ideagen.ops.notifications import delete_notification
    from ideagen.ops.requests import NotificationRequest

    ctx, _ = make_context(database)
    result = delete_notification(
        ctx, NotificationRequest(user_id=user_id, notification_id=notification_id)
    )
    output_result(result, title="Deleted")


@app.command("clear")
def clear(
    user_id: str = typer.Argument(..., help="User ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Delete every notification of the user."""
    from ideagen.ops.notifications import clear_notifications

    if not yes:
        typer.confirm(f"Delete all notifications of {user_id}?", abort=True)

    ctx, _ = make_context(database)
    result = clear_notifications(ctx, user_id)
    if not result.success:
        fail(result)
    console.print(f"Deleted {result.data.deleted} notification(s)")
