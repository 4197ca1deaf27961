"""Structured event notifications.

Commands emit events such as ``vote-cast`` or ``candidacy-ended``; they are
stored in the ``notifications`` table for the addressed user and handed to
any subscribed presenter (toast widget, push channel).  Events with no
``user_id`` are broadcast to administrators.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from smartvote.models.enums import NotificationType, Role
from smartvote.models.notification import Notification
from smartvote.services.store import EntityStore

logger = logging.getLogger(__name__)

Subscriber = Callable[[Notification], None]


class NotificationCenter:
    def __init__(self, store: EntityStore, clock: Callable[[], datetime]) -> None:
        self.store = store
        self.clock = clock
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(
        self,
        kind: NotificationType,
        title: str,
        message: str,
        user_id: str | None = None,
        election_id: str | None = None,
    ) -> Notification:
        notification = Notification(
            id=f"notif-{uuid4().hex[:16]}",
            type=kind,
            title=title,
            message=message,
            user_id=user_id,
            election_id=election_id,
            timestamp=self.clock(),
        )
        self.store.notifications.insert(notification)
        logger.info(
            "notification_emitted",
            extra={
                "type": kind.value,
                "user_id": user_id,
                "election_id": election_id,
            },
        )
        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception:
                logger.warning("notification_subscriber_failed", exc_info=True)
        return notification

    def _visible_to(self, user_id: str) -> Callable[[Notification], bool]:
        user = self.store.users.find_by_id(user_id)
        sees_broadcast = user is not None and user.role in (Role.admin, Role.super_admin)

        def _check(n: Notification) -> bool:
            return n.user_id == user_id or (n.user_id is None and sees_broadcast)

        return _check

    def notifications_for(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        """Notifications addressed to *user_id*, newest first."""
        visible = self._visible_to(user_id)
        rows = self.store.notifications.find_all(
            lambda n: visible(n) and (not unread_only or not n.read)
        )
        return list(reversed(rows))

    def mark_read(self, user_id: str, notification_id: str) -> Notification | None:
        notification = self.store.notifications.find_by_id(notification_id)
        if notification is None or not self._visible_to(user_id)(notification):
            return None
        return self.store.notifications.update(notification_id, {"read": True})

    def mark_all_read(self, user_id: str) -> int:
        unread = self.notifications_for(user_id, unread_only=True)
        for notification in unread:
            self.store.notifications.update(notification.id, {"read": True})
        return len(unread)
