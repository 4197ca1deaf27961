"""Candidacy commands: self-application, promotion, review and removal.

A voter either applies (unapproved, awaiting review) or is promoted by an
administrator (created approved and active).  Approval and rejection are
one-way transitions.  Removing a candidate also deletes every vote cast for
them in that election, so tallies always match the current roster.
"""

from __future__ import annotations

import logging

from smartvote.core.errors import CommandResult, ErrorKind
from smartvote.models.application import Application, ApplicationCreate
from smartvote.models.election import Election
from smartvote.models.enums import NotificationType, Permission, Role
from smartvote.services import eligibility
from smartvote.services.context import ServiceContext, new_id
from smartvote.services.store import EntityStore

logger = logging.getLogger(__name__)


def _existing(store: EntityStore, user_id: str, election_id: str) -> Application | None:
    return store.applications.find_one(
        lambda a: a.user_id == user_id and a.election_id == election_id
    )


def _candidate_limit_reached(store: EntityStore, election: Election) -> bool:
    return eligibility.approved_candidate_count(store, election.id) >= election.max_candidates


def _application_or_fail(store: EntityStore, application_id: str) -> CommandResult[Application]:
    app = store.applications.find_by_id(application_id)
    if app is None:
        return CommandResult.failure(ErrorKind.not_found, f"Application {application_id} not found")
    return CommandResult.success(app)


def apply(
    ctx: ServiceContext,
    user_id: str,
    payload: ApplicationCreate,
) -> CommandResult[Application]:
    """File an unapproved candidacy for *user_id*."""
    with ctx.command() as store:
        check = eligibility.authorize(store, user_id, Permission.apply_candidacy)
        if not check.ok:
            return check
        user = check.value
        election = store.elections.find_by_id(payload.election_id)
        if election is None:
            return CommandResult.failure(
                ErrorKind.not_found, f"Election {payload.election_id} not found"
            )
        if _existing(store, user_id, election.id) is not None:
            return CommandResult.failure(
                ErrorKind.duplicate_application,
                f"{user.username} has already applied to {election.name!r}",
            )
        if not election.active:
            return CommandResult.failure(
                ErrorKind.election_not_active, f"Election {election.name!r} is not active"
            )
        if _candidate_limit_reached(store, election):
            return CommandResult.failure(
                ErrorKind.limit_reached, f"Election {election.name!r} has no candidate slots left"
            )

        app = Application(
            id=new_id("application"),
            user_id=user_id,
            election_id=election.id,
            applied_at=ctx.now(),
            application_message=payload.application_message,
            qualifications=payload.qualifications,
            goals=payload.goals,
        )
        store.applications.insert(app)
        ctx.notifications.emit(
            NotificationType.application_submitted,
            "Candidate Application",
            f"{user.username} applied to become a candidate in {election.name!r}",
            election_id=election.id,
        )
        ctx.persist("applications", "notifications")

    logger.info(
        "application_submitted",
        extra={"application_id": app.id, "user_id": user_id, "election_id": election.id},
    )
    return CommandResult.success(app)


def promote(
    ctx: ServiceContext,
    admin_id: str,
    user_id: str,
    election_id: str,
    message: str | None = None,
) -> CommandResult[Application]:
    """Create a pre-approved candidacy on behalf of a voter."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_candidates)
        if not check.ok:
            return check
        user = store.users.find_by_id(user_id)
        if user is None:
            return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
        election = store.elections.find_by_id(election_id)
        if election is None:
            return CommandResult.failure(ErrorKind.not_found, f"Election {election_id} not found")
        if user.role != Role.voter or not user.approved:
            return CommandResult.failure(
                ErrorKind.invalid_candidate, f"{user.username} is not an approved voter"
            )
        if _existing(store, user_id, election_id) is not None:
            return CommandResult.failure(
                ErrorKind.duplicate_application,
                f"{user.username} is already a candidate for {election.name!r}",
            )
        if _candidate_limit_reached(store, election):
            return CommandResult.failure(
                ErrorKind.limit_reached, f"Election {election.name!r} has no candidate slots left"
            )

        app = Application(
            id=new_id("application"),
            user_id=user_id,
            election_id=election_id,
            approved=True,
            active=True,
            applied_at=ctx.now(),
            promoted_by=admin_id,
            promotion_message=message,
        )
        store.applications.insert(app)
        ctx.notifications.emit(
            NotificationType.candidate_promoted,
            "Promoted to Candidate",
            f"You have been promoted to candidate for {election.name!r}",
            user_id=user_id,
            election_id=election_id,
        )
        ctx.persist("applications", "notifications")

    logger.info(
        "candidate_promoted",
        extra={"application_id": app.id, "user_id": user_id, "admin_id": admin_id},
    )
    return CommandResult.success(app)


def approve(ctx: ServiceContext, admin_id: str, application_id: str) -> CommandResult[Application]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_candidates)
        if not check.ok:
            return check
        found = _application_or_fail(store, application_id)
        if not found.ok:
            return found
        app = found.value
        if app.resolved:
            return CommandResult.failure(
                ErrorKind.already_resolved, f"Application {application_id} was already reviewed"
            )
        election = store.elections.find_by_id(app.election_id)
        if election is not None and _candidate_limit_reached(store, election):
            return CommandResult.failure(
                ErrorKind.limit_reached, f"Election {election.name!r} has no candidate slots left"
            )

        app = store.applications.update(
            application_id,
            {
                "approved": True,
                "approved_at": ctx.now(),
                "approved_by": admin_id,
                "active": True,
            },
        )
        ctx.notifications.emit(
            NotificationType.application_approved,
            "Application Approved",
            "Your candidate application has been approved",
            user_id=app.user_id,
            election_id=app.election_id,
        )
        ctx.persist("applications", "notifications")
    return CommandResult.success(app)


def reject(
    ctx: ServiceContext,
    admin_id: str,
    application_id: str,
    reason: str = "",
) -> CommandResult[Application]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_candidates)
        if not check.ok:
            return check
        found = _application_or_fail(store, application_id)
        if not found.ok:
            return found
        if found.value.resolved:
            return CommandResult.failure(
                ErrorKind.already_resolved, f"Application {application_id} was already reviewed"
            )

        app = store.applications.update(
            application_id,
            {
                "rejected": True,
                "rejected_at": ctx.now(),
                "rejected_by": admin_id,
                "rejection_reason": reason,
                "active": False,
            },
        )
        ctx.notifications.emit(
            NotificationType.application_rejected,
            "Application Rejected",
            f"Your candidate application was rejected: {reason}" if reason
            else "Your candidate application was rejected",
            user_id=app.user_id,
            election_id=app.election_id,
        )
        ctx.persist("applications", "notifications")
    return CommandResult.success(app)


def remove_candidate(ctx: ServiceContext, admin_id: str, application_id: str) -> CommandResult[int]:
    """Delete the candidacy and every vote cast for that candidate in its election.

    Returns the number of votes removed.
    """
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_candidates)
        if not check.ok:
            return check
        found = _application_or_fail(store, application_id)
        if not found.ok:
            return found
        app = found.value

        store.applications.delete(application_id)
        removed = store.votes.delete_where(
            lambda v: v.candidate_id == app.user_id and v.election_id == app.election_id
        )
        ctx.notifications.emit(
            NotificationType.candidate_removed,
            "Candidacy Removed",
            "You have been removed as a candidate",
            user_id=app.user_id,
            election_id=app.election_id,
        )
        ctx.persist("applications", "votes", "notifications")

    logger.info(
        "candidate_removed",
        extra={
            "application_id": application_id,
            "election_id": app.election_id,
            "votes_removed": len(removed),
        },
    )
    return CommandResult.success(len(removed))


def toggle_candidate_access(
    ctx: ServiceContext,
    admin_id: str,
    application_id: str,
) -> CommandResult[Application]:
    """Enable or disable an approved candidacy without touching its review state."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_candidates)
        if not check.ok:
            return check
        found = _application_or_fail(store, application_id)
        if not found.ok:
            return found
        app = found.value
        if not app.approved:
            return CommandResult.failure(
                ErrorKind.invalid_candidate, f"Application {application_id} is not approved"
            )
        app = store.applications.update(
            application_id, {"active": not eligibility.is_enabled(app)}
        )
        ctx.persist("applications")

    logger.info(
        "candidate_access_toggled",
        extra={"application_id": application_id, "active": app.active},
    )
    return CommandResult.success(app)


def list_applications(
    ctx: ServiceContext,
    election_id: str | None = None,
    user_id: str | None = None,
    pending_only: bool = False,
) -> list[Application]:
    return ctx.store.applications.find_all(
        lambda a: (election_id is None or a.election_id == election_id)
        and (user_id is None or a.user_id == user_id)
        and (not pending_only or not a.resolved)
    )
