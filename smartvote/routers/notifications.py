"""Notification endpoints for the acting user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from smartvote.models.notification import Notification
from smartvote.routers.deps import ActorId, Context

router = APIRouter()


@router.get("", response_model=list[Notification])
async def list_notifications(
    actor_id: ActorId,
    ctx: Context,
    unread: bool = Query(default=False, description="Only unread notifications"),
) -> list[Notification]:
    return ctx.notifications.notifications_for(actor_id, unread_only=unread)


@router.post("/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, actor_id: ActorId, ctx: Context) -> Notification:
    with ctx.command():
        notification = ctx.notifications.mark_read(actor_id, notification_id)
        if notification is not None:
            ctx.persist("notifications")
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.post("/read-all")
async def mark_all_read(actor_id: ActorId, ctx: Context) -> dict[str, Any]:
    with ctx.command():
        count = ctx.notifications.mark_all_read(actor_id)
        if count:
            ctx.persist("notifications")
    return {"marked": count}
