"""Unit tests for candidacy commands."""

from __future__ import annotations

from collections.abc import Callable

from smartvote.core.errors import ErrorKind
from smartvote.models.application import ApplicationCreate
from smartvote.models.election import Election
from smartvote.models.enums import NotificationType, Role
from smartvote.models.user import User
from smartvote.services import candidacy, elections, eligibility
from smartvote.services.context import ServiceContext


# ---------------------------------------------------------------------------
# apply
# ---------------------------------------------------------------------------

class TestApply:
    def test_apply_creates_pending_application(
        self,
        ctx: ServiceContext,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()

        result = candidacy.apply(
            ctx,
            voter.id,
            ApplicationCreate(election_id=election.id, goals="Better library hours"),
        )

        assert result.ok
        app = result.value
        assert app.approved is False
        assert app.rejected is False
        assert app.goals == "Better library hours"
        assert eligibility.effective_role(ctx.store, voter) == Role.voter

    def test_apply_twice_is_duplicate(
        self,
        ctx: ServiceContext,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()
        candidacy.apply(ctx, voter.id, ApplicationCreate(election_id=election.id))

        result = candidacy.apply(ctx, voter.id, ApplicationCreate(election_id=election.id))

        assert result.error == ErrorKind.duplicate_application
        assert ctx.store.applications.count(lambda a: a.user_id == voter.id) == 1

    def test_apply_to_closed_election(
        self,
        ctx: ServiceContext,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election(active=False)

        result = candidacy.apply(ctx, make_voter().id, ApplicationCreate(election_id=election.id))

        assert result.error == ErrorKind.election_not_active

    def test_apply_when_roster_full(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election(max_candidates=1)
        candidacy.promote(ctx, admin_id, make_voter().id, election.id)

        result = candidacy.apply(ctx, make_voter().id, ApplicationCreate(election_id=election.id))

        assert result.error == ErrorKind.limit_reached

    def test_unapproved_voter_cannot_apply(
        self,
        ctx: ServiceContext,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        pending = make_voter(approved=False)

        result = candidacy.apply(ctx, pending.id, ApplicationCreate(election_id=election.id))

        assert result.error == ErrorKind.unauthorized

    def test_admin_cannot_apply(
        self, ctx: ServiceContext, admin_id: str, make_election: Callable[..., Election]
    ) -> None:
        election = make_election()

        result = candidacy.apply(ctx, admin_id, ApplicationCreate(election_id=election.id))

        assert result.error == ErrorKind.unauthorized

    def test_apply_notifies_admins(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        candidacy.apply(ctx, make_voter().id, ApplicationCreate(election_id=election.id))

        latest = ctx.notifications.notifications_for(admin_id)[0]

        assert latest.type == NotificationType.application_submitted
        assert latest.user_id is None


# ---------------------------------------------------------------------------
# promote
# ---------------------------------------------------------------------------

class TestPromote:
    def test_promote_grants_candidate_role(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()

        app = candidacy.promote(ctx, admin_id, voter.id, election.id, message="Welcome").value

        assert app.approved is True
        assert app.active is True
        assert app.promoted_by == admin_id
        assert app.promotion_message == "Welcome"
        assert eligibility.effective_role(ctx.store, voter) == Role.candidate

    def test_promote_requires_admin(
        self,
        ctx: ServiceContext,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        actor = make_voter()

        result = candidacy.promote(ctx, actor.id, make_voter().id, election.id)

        assert result.error == ErrorKind.unauthorized

    def test_promote_unapproved_voter(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()

        result = candidacy.promote(ctx, admin_id, make_voter(approved=False).id, election.id)

        assert result.error == ErrorKind.invalid_candidate

    def test_promote_admin_account(
        self, ctx: ServiceContext, admin_id: str, make_election: Callable[..., Election]
    ) -> None:
        election = make_election()

        result = candidacy.promote(ctx, admin_id, admin_id, election.id)

        assert result.error == ErrorKind.invalid_candidate

    def test_promote_missing_targets(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()

        assert candidacy.promote(ctx, admin_id, "user-ghost", election.id).error == ErrorKind.not_found
        assert candidacy.promote(ctx, admin_id, make_voter().id, "election-ghost").error == ErrorKind.not_found

    def test_promote_existing_applicant_is_duplicate(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()
        candidacy.apply(ctx, voter.id, ApplicationCreate(election_id=election.id))

        result = candidacy.promote(ctx, admin_id, voter.id, election.id)

        assert result.error == ErrorKind.duplicate_application

    def test_promote_into_closed_election_stays_inactive_role(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election(active=False)
        voter = make_voter()

        result = candidacy.promote(ctx, admin_id, voter.id, election.id)

        assert result.ok
        assert eligibility.effective_role(ctx.store, voter) == Role.voter


# ---------------------------------------------------------------------------
# approve / reject
# ---------------------------------------------------------------------------

class TestReview:
    def _pending(
        self, ctx: ServiceContext, voter: User, election: Election
    ) -> str:
        return candidacy.apply(ctx, voter.id, ApplicationCreate(election_id=election.id)).value.id

    def test_approve_activates_candidacy(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()
        app_id = self._pending(ctx, voter, election)

        app = candidacy.approve(ctx, admin_id, app_id).value

        assert app.approved is True
        assert app.approved_by == admin_id
        assert app.approved_at is not None
        assert eligibility.is_active_candidate(ctx.store, voter)
        types = [n.type for n in ctx.notifications.notifications_for(voter.id)]
        assert NotificationType.application_approved in types

    def test_reject_records_reason(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()
        app_id = self._pending(ctx, voter, election)

        app = candidacy.reject(ctx, admin_id, app_id, reason="Incomplete manifesto").value

        assert app.rejected is True
        assert app.active is False
        assert app.rejection_reason == "Incomplete manifesto"
        assert eligibility.effective_role(ctx.store, voter) == Role.voter

    def test_review_is_one_way(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        approved_id = self._pending(ctx, make_voter(), election)
        rejected_id = self._pending(ctx, make_voter(), election)
        candidacy.approve(ctx, admin_id, approved_id)
        candidacy.reject(ctx, admin_id, rejected_id)

        assert candidacy.reject(ctx, admin_id, approved_id).error == ErrorKind.already_resolved
        assert candidacy.approve(ctx, admin_id, rejected_id).error == ErrorKind.already_resolved
        assert candidacy.approve(ctx, admin_id, approved_id).error == ErrorKind.already_resolved

    def test_approve_respects_candidate_limit(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election(max_candidates=1)
        app_id = self._pending(ctx, make_voter(), election)
        candidacy.promote(ctx, admin_id, make_voter().id, election.id)

        result = candidacy.approve(ctx, admin_id, app_id)

        assert result.error == ErrorKind.limit_reached
        assert ctx.store.applications.find_by_id(app_id).approved is False

    def test_approve_unknown_application(self, ctx: ServiceContext, admin_id: str) -> None:
        assert candidacy.approve(ctx, admin_id, "application-x").error == ErrorKind.not_found

    def test_list_pending_applications(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        pending_id = self._pending(ctx, make_voter(), election)
        candidacy.promote(ctx, admin_id, make_voter().id, election.id)

        pending = candidacy.list_applications(ctx, election_id=election.id, pending_only=True)

        assert [a.id for a in pending] == [pending_id]
        assert len(candidacy.list_applications(ctx, election_id=election.id)) == 2


# ---------------------------------------------------------------------------
# access toggle
# ---------------------------------------------------------------------------

class TestToggleAccess:
    def test_toggle_disables_and_restores(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        voter = make_voter()
        app = candidacy.promote(ctx, admin_id, voter.id, election.id).value

        disabled = candidacy.toggle_candidate_access(ctx, admin_id, app.id).value
        assert disabled.active is False
        assert eligibility.effective_role(ctx.store, voter) == Role.voter
        assert eligibility.election_candidates(ctx.store, election.id) == []

        enabled = candidacy.toggle_candidate_access(ctx, admin_id, app.id).value
        assert enabled.active is True
        assert eligibility.effective_role(ctx.store, voter) == Role.candidate

    def test_toggle_pending_application_rejected(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election()
        app = candidacy.apply(ctx, make_voter().id, ApplicationCreate(election_id=election.id)).value

        result = candidacy.toggle_candidate_access(ctx, admin_id, app.id)

        assert result.error == ErrorKind.invalid_candidate

    def test_toggled_off_frees_roster_slot(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        election = make_election(max_candidates=1)
        app = candidacy.promote(ctx, admin_id, make_voter().id, election.id).value
        candidacy.toggle_candidate_access(ctx, admin_id, app.id)

        result = candidacy.promote(ctx, admin_id, make_voter().id, election.id)

        assert result.ok

    def test_closing_then_approving_in_other_election(
        self,
        ctx: ServiceContext,
        admin_id: str,
        make_voter: Callable[..., User],
        make_election: Callable[..., Election],
    ) -> None:
        first = make_election()
        second = make_election()
        voter = make_voter()
        candidacy.promote(ctx, admin_id, voter.id, first.id)
        candidacy.promote(ctx, admin_id, voter.id, second.id)

        elections.close_election(ctx, admin_id, first.id)

        assert eligibility.effective_role(ctx.store, voter) == Role.candidate
        assert [a.election_id for a in eligibility.active_candidacies(ctx.store, voter)] == [second.id]
