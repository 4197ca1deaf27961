"""Pydantic model for structured notifications emitted by commands."""

from datetime import datetime

from smartvote.models.base import CamelModel
from smartvote.models.enums import NotificationType


class Notification(CamelModel):
    """A single event addressed to a user (or to admins when ``user_id`` is None)."""
    id: str
    type: NotificationType
    title: str
    message: str
    user_id: str | None = None
    election_id: str | None = None
    timestamp: datetime
    read: bool = False
