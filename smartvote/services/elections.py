"""Election lifecycle: creation, close/reopen toggle, limits and deletion.

An election is a two-state toggle (active / closed).  Closing deactivates
every candidacy of the election while keeping the records for history, so
promoted voters drop back to their base role on the next eligibility check.
Reopening does *not* reactivate those candidacies; only a fresh approval or
an explicit access toggle restores them.
"""

from __future__ import annotations

import logging

from smartvote.core.errors import CommandResult, ErrorKind
from smartvote.models.election import Election, ElectionCreate, ElectionHistory
from smartvote.models.enums import LimitField, NotificationType, Permission
from smartvote.services import eligibility
from smartvote.services.context import ServiceContext, new_id

logger = logging.getLogger(__name__)


def _not_found(election_id: str) -> CommandResult[Election]:
    return CommandResult.failure(ErrorKind.not_found, f"Election {election_id} not found")


def create_election(
    ctx: ServiceContext,
    admin_id: str,
    payload: ElectionCreate,
) -> CommandResult[Election]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check

        name = payload.name.strip()
        if store.elections.find_one(lambda e: e.name.lower() == name.lower()):
            return CommandResult.failure(
                ErrorKind.conflict, f"An election named {name!r} already exists"
            )
        if payload.max_candidates < 1 or payload.max_voters < 1:
            return CommandResult.failure(
                ErrorKind.invalid_limit, "maxCandidates and maxVoters must be at least 1"
            )

        election = Election(
            id=new_id("election"),
            name=name,
            description=payload.description,
            active=payload.active,
            max_candidates=payload.max_candidates,
            max_voters=payload.max_voters,
            created_at=ctx.now(),
            created_by=admin_id,
        )
        store.elections.insert(election)
        ctx.notifications.emit(
            NotificationType.election_created,
            "Election Created",
            f"Election {election.name!r} has been created",
            election_id=election.id,
        )
        ctx.persist("elections", "notifications")

    logger.info("election_created", extra={"election_id": election.id, "admin_id": admin_id})
    return CommandResult.success(election)


def _close(ctx: ServiceContext, election: Election) -> Election:
    """Close *election* and deactivate its candidacies. Caller holds the lock."""
    store = ctx.store
    now = ctx.now()
    closed = store.elections.update(election.id, {"active": False, "closed_at": now})

    affected: set[str] = set()
    for app in store.applications.find_all(lambda a: a.election_id == election.id):
        if app.approved and eligibility.is_enabled(app):
            affected.add(app.user_id)
        store.applications.update(
            app.id,
            {"active": False, "election_closed": True, "closed_at": now},
        )

    for user_id in sorted(affected):
        ctx.notifications.emit(
            NotificationType.candidacy_ended,
            "Candidate Status Updated",
            f"Your candidacy in {election.name!r} ended because the election closed",
            user_id=user_id,
            election_id=election.id,
        )
    ctx.notifications.emit(
        NotificationType.election_closed,
        "Election Closed",
        f"Election {election.name!r} has been closed",
        election_id=election.id,
    )
    logger.info(
        "election_closed",
        extra={"election_id": election.id, "candidacies_ended": len(affected)},
    )
    return closed


def _reopen(ctx: ServiceContext, election: Election) -> Election:
    reopened = ctx.store.elections.update(election.id, {"active": True, "closed_at": None})
    ctx.notifications.emit(
        NotificationType.election_reopened,
        "Election Reopened",
        f"Election {election.name!r} is active again",
        election_id=election.id,
    )
    logger.info("election_reopened", extra={"election_id": election.id})
    return reopened


def close_election(ctx: ServiceContext, admin_id: str, election_id: str) -> CommandResult[Election]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check
        election = store.elections.find_by_id(election_id)
        if election is None:
            return _not_found(election_id)
        if not election.active:
            return CommandResult.failure(
                ErrorKind.election_not_active, f"Election {election.name!r} is already closed"
            )
        closed = _close(ctx, election)
        ctx.persist("elections", "applications", "notifications")
    return CommandResult.success(closed)


def reopen_election(ctx: ServiceContext, admin_id: str, election_id: str) -> CommandResult[Election]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check
        election = store.elections.find_by_id(election_id)
        if election is None:
            return _not_found(election_id)
        if election.active:
            return CommandResult.failure(
                ErrorKind.conflict, f"Election {election.name!r} is already active"
            )
        reopened = _reopen(ctx, election)
        ctx.persist("elections", "notifications")
    return CommandResult.success(reopened)


def toggle_election(ctx: ServiceContext, admin_id: str, election_id: str) -> CommandResult[Election]:
    """Close an active election or reopen a closed one."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check
        election = store.elections.find_by_id(election_id)
        if election is None:
            return _not_found(election_id)
        if election.active:
            updated = _close(ctx, election)
            ctx.persist("elections", "applications", "notifications")
        else:
            updated = _reopen(ctx, election)
            ctx.persist("elections", "notifications")
    return CommandResult.success(updated)


def update_limits(
    ctx: ServiceContext,
    admin_id: str,
    election_id: str,
    field: LimitField | str,
    value: int,
) -> CommandResult[Election]:
    """Change ``max_candidates`` or ``max_voters``; existing records are untouched."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check
        try:
            field = LimitField(field)
        except ValueError:
            return CommandResult.failure(ErrorKind.invalid_limit, f"Unknown limit field {field!r}")
        if election_id not in store.elections:
            return _not_found(election_id)
        if value < 1:
            return CommandResult.failure(
                ErrorKind.invalid_limit, f"{field.value} must be a positive integer"
            )
        election = store.elections.update(election_id, {field.name: value})
        ctx.persist("elections")
    return CommandResult.success(election)


def delete_election(ctx: ServiceContext, admin_id: str, election_id: str) -> CommandResult[Election]:
    """Delete an election with all of its applications and votes."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_elections)
        if not check.ok:
            return check
        election = store.delete_election(election_id)
        if election is None:
            return _not_found(election_id)
        ctx.persist("elections", "applications", "votes")
    logger.info("election_deleted", extra={"election_id": election_id, "admin_id": admin_id})
    return CommandResult.success(election)


def get_election(ctx: ServiceContext, election_id: str) -> CommandResult[Election]:
    election = ctx.store.elections.find_by_id(election_id)
    if election is None:
        return _not_found(election_id)
    return CommandResult.success(election)


def list_elections(ctx: ServiceContext, active: bool | None = None) -> list[Election]:
    return ctx.store.elections.find_all(lambda e: active is None or e.active == active)


def election_history(ctx: ServiceContext, election_id: str) -> CommandResult[ElectionHistory]:
    """The election, every application ever filed in it and its vote count."""
    store = ctx.store
    election = store.elections.find_by_id(election_id)
    if election is None:
        return _not_found(election_id)
    return CommandResult.success(
        ElectionHistory(
            election=election,
            applications=store.applications.find_all(lambda a: a.election_id == election_id),
            total_votes=store.votes.count(lambda v: v.election_id == election_id),
        )
    )
