"""Vote casting, receipts and tallies.

Each voter casts at most one vote per election and a vote is never edited
or retracted.  The duplicate check runs before the active-election check, so
voting twice always reports ``already_voted`` whatever the election state.

Tallies order candidates by vote count (descending) and break ties by
candidate id (ascending) so results are deterministic.
"""

from __future__ import annotations

import logging
from collections import Counter

from smartvote.core.errors import CommandResult, ErrorKind
from smartvote.models.enums import NONE_OF_ABOVE, NONE_OF_ABOVE_LABEL, NotificationType, Permission
from smartvote.models.vote import ElectionResults, TallyEntry, Vote, VoteReceipt
from smartvote.services import eligibility
from smartvote.services.context import ServiceContext, new_id
from smartvote.services.store import EntityStore

logger = logging.getLogger(__name__)


def candidate_name(store: EntityStore, candidate_id: str) -> str | None:
    if candidate_id == NONE_OF_ABOVE:
        return NONE_OF_ABOVE_LABEL
    user = store.users.find_by_id(candidate_id)
    return user.username if user else None


def _on_roster(store: EntityStore, election_id: str, candidate_id: str) -> bool:
    if candidate_id == NONE_OF_ABOVE:
        return True
    return store.applications.find_one(
        lambda a: a.election_id == election_id
        and a.user_id == candidate_id
        and a.approved
        and eligibility.is_enabled(a)
    ) is not None


def cast_vote(
    ctx: ServiceContext,
    voter_id: str,
    election_id: str,
    candidate_id: str,
) -> CommandResult[Vote]:
    with ctx.command() as store:
        check = eligibility.authorize(store, voter_id, Permission.vote)
        if not check.ok:
            return check
        election = store.elections.find_by_id(election_id)
        if election is None:
            return CommandResult.failure(ErrorKind.not_found, f"Election {election_id} not found")
        if eligibility.has_voted(store, voter_id, election_id):
            logger.warning(
                "duplicate_vote_attempt",
                extra={"voter_id": voter_id, "election_id": election_id},
            )
            return CommandResult.failure(
                ErrorKind.already_voted, f"Already voted in {election.name!r}"
            )
        if not election.active:
            return CommandResult.failure(
                ErrorKind.election_not_active, f"Election {election.name!r} is not active"
            )
        if not _on_roster(store, election_id, candidate_id):
            return CommandResult.failure(
                ErrorKind.invalid_candidate,
                f"{candidate_id} is not a candidate in {election.name!r}",
            )
        if eligibility.voter_count(store, election_id) >= election.max_voters:
            return CommandResult.failure(
                ErrorKind.limit_reached, f"Election {election.name!r} reached its voter limit"
            )

        vote = Vote(
            id=new_id("vote"),
            voter_id=voter_id,
            election_id=election_id,
            candidate_id=candidate_id,
            voted_at=ctx.now(),
            receipt_id=ctx.new_receipt_id(),
        )
        store.votes.insert(vote)
        ctx.notifications.emit(
            NotificationType.vote_cast,
            "Vote Cast Successfully",
            f"Your vote has been recorded for {election.name}",
            user_id=voter_id,
            election_id=election_id,
        )
        ctx.persist("votes", "notifications")

    logger.info(
        "vote_cast",
        extra={"vote_id": vote.id, "election_id": election_id, "receipt_id": vote.receipt_id},
    )
    return CommandResult.success(vote)


def tally(ctx: ServiceContext, election_id: str) -> CommandResult[list[TallyEntry]]:
    """Vote counts per candidate, highest first; ties broken by candidate id."""
    store = ctx.store
    if election_id not in store.elections:
        return CommandResult.failure(ErrorKind.not_found, f"Election {election_id} not found")

    counts = Counter(v.candidate_id for v in store.votes.find_all(lambda v: v.election_id == election_id))
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return CommandResult.success([
        TallyEntry(
            candidate_id=cid,
            candidate_name=candidate_name(store, cid),
            vote_count=count,
        )
        for cid, count in ranked
    ])


def election_results(ctx: ServiceContext, election_id: str) -> CommandResult[ElectionResults]:
    ranked = tally(ctx, election_id)
    if not ranked.ok:
        return ranked
    election = ctx.store.elections.find_by_id(election_id)
    return CommandResult.success(
        ElectionResults(
            election_id=election.id,
            election_name=election.name,
            active=election.active,
            total_votes=sum(entry.vote_count for entry in ranked.value),
            results=ranked.value,
        )
    )


def get_receipt(ctx: ServiceContext, receipt_id: str) -> CommandResult[VoteReceipt]:
    """Look up a vote by its receipt; the voter id is masked."""
    store = ctx.store
    vote = store.votes.find_one(lambda v: v.receipt_id == receipt_id)
    if vote is None:
        return CommandResult.failure(ErrorKind.not_found, f"Receipt {receipt_id} not found")
    election = store.elections.find_by_id(vote.election_id)
    return CommandResult.success(
        VoteReceipt(
            receipt_id=vote.receipt_id,
            election_id=vote.election_id,
            election_name=election.name if election else None,
            candidate_id=vote.candidate_id,
            candidate_name=candidate_name(store, vote.candidate_id),
            voter_ref=f"{vote.voter_id[:8]}***",
            voted_at=vote.voted_at,
        )
    )
