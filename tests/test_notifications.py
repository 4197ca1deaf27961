"""Unit tests for the notification center."""

from __future__ import annotations

from collections.abc import Callable

from smartvote.models.enums import NotificationType
from smartvote.models.notification import Notification
from smartvote.models.user import User
from smartvote.services.context import ServiceContext


class TestSubscribers:
    def test_unsubscribed_callback_stops_receiving(
        self, ctx: ServiceContext, make_voter: Callable[..., User]
    ) -> None:
        voter = make_voter()
        seen: list[Notification] = []
        ctx.notifications.subscribe(seen.append)

        ctx.notifications.emit(NotificationType.vote_cast, "First", "one", user_id=voter.id)
        ctx.notifications.unsubscribe(seen.append)
        ctx.notifications.emit(NotificationType.vote_cast, "Second", "two", user_id=voter.id)

        assert [n.title for n in seen] == ["First"]
        assert len(ctx.notifications.notifications_for(voter.id)) == 3

    def test_unsubscribe_unknown_callback_is_noop(self, ctx: ServiceContext) -> None:
        ctx.notifications.unsubscribe(print)

    def test_failing_subscriber_does_not_block_others(
        self, ctx: ServiceContext, make_voter: Callable[..., User]
    ) -> None:
        voter = make_voter()
        seen: list[Notification] = []

        def _broken(notification: Notification) -> None:
            raise RuntimeError("presenter offline")

        ctx.notifications.subscribe(_broken)
        ctx.notifications.subscribe(seen.append)

        emitted = ctx.notifications.emit(
            NotificationType.candidate_removed, "Removed", "bye", user_id=voter.id
        )

        assert seen == [emitted]
        assert emitted.id in ctx.store.notifications
