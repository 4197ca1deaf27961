"""Read-only export of every table plus a summary block.

Pure projection of the current store: users without credential hashes,
applications and votes annotated with display names, and votes detached
from their voters.
"""

from __future__ import annotations

import logging

from smartvote.core.errors import CommandResult
from smartvote.models.enums import Permission
from smartvote.models.export import (
    ExportedApplication,
    ExportedVote,
    ExportPayload,
    ExportSummary,
)
from smartvote.models.user import UserPublic
from smartvote.services import eligibility
from smartvote.services.context import ServiceContext
from smartvote.services.voting import candidate_name

logger = logging.getLogger(__name__)


def export_data(ctx: ServiceContext, admin_id: str) -> CommandResult[ExportPayload]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.export_data)
        if not check.ok:
            return check

        def _election_name(election_id: str) -> str | None:
            election = store.elections.find_by_id(election_id)
            return election.name if election else None

        elections = store.elections.find_all()
        applications = [
            ExportedApplication(
                **app.model_dump(),
                candidate_name=candidate_name(store, app.user_id),
                election_name=_election_name(app.election_id),
            )
            for app in store.applications
        ]
        votes = [
            ExportedVote(
                election_id=vote.election_id,
                election_name=_election_name(vote.election_id),
                candidate_id=vote.candidate_id,
                candidate_name=candidate_name(store, vote.candidate_id),
                voted_at=vote.voted_at,
                receipt_id=vote.receipt_id,
            )
            for vote in store.votes
        ]
        payload = ExportPayload(
            users=[UserPublic.model_validate(user) for user in store.users],
            elections=elections,
            applications=applications,
            votes=votes,
            summary=ExportSummary(
                total_elections=len(elections),
                active_elections=sum(1 for e in elections if e.active),
                total_votes=len(votes),
                total_candidates=sum(1 for a in applications if a.approved),
                exported_at=ctx.now(),
            ),
        )

    logger.info(
        "data_exported",
        extra={"admin_id": admin_id, "elections": len(elections), "votes": len(votes)},
    )
    return CommandResult.success(payload)
