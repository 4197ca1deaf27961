"""Eligibility engine: effective roles, permissions and election access.

A user's *effective* role is never stored.  Admin and super-admin roles are
static; everybody else is a ``candidate`` exactly while they hold at least
one approved, enabled candidacy in an election that is currently active, and
falls back to their base role otherwise.  Every function here reads the
current store state, so results change as elections open and close without
any write to the user row.
"""

from __future__ import annotations

from smartvote.core.errors import CommandResult, ErrorKind
from smartvote.models.application import Application
from smartvote.models.election import Election
from smartvote.models.enums import Permission, Role
from smartvote.models.user import User
from smartvote.services.store import EntityStore

_ADMIN_PERMISSIONS: frozenset[Permission] = frozenset({
    Permission.manage_elections,
    Permission.manage_candidates,
    Permission.approve_users,
    Permission.view_results,
    Permission.export_data,
})

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.voter: frozenset({
        Permission.vote,
        Permission.apply_candidacy,
        Permission.view_results,
    }),
    Role.candidate: frozenset({
        Permission.vote,
        Permission.apply_candidacy,
        Permission.view_results,
    }),
    Role.admin: _ADMIN_PERMISSIONS,
    Role.super_admin: _ADMIN_PERMISSIONS | {Permission.manage_users},
}

STATIC_ROLES = (Role.admin, Role.super_admin)


def is_enabled(application: Application) -> bool:
    """An unset ``active`` flag counts as enabled."""
    return application.active is not False


def active_candidacies(store: EntityStore, user: User) -> list[Application]:
    """Approved, enabled candidacies of *user* in currently active elections."""

    def _counts(app: Application) -> bool:
        if app.user_id != user.id or not app.approved or not is_enabled(app):
            return False
        election = store.elections.find_by_id(app.election_id)
        return election is not None and election.active

    return store.applications.find_all(_counts)


def effective_role(store: EntityStore, user: User) -> Role:
    """Return the role used for authorization decisions."""
    if user.role in STATIC_ROLES:
        return user.role
    if active_candidacies(store, user):
        return Role.candidate
    return user.role


def is_active_candidate(store: EntityStore, user: User) -> bool:
    return effective_role(store, user) == Role.candidate


def has_permission(store: EntityStore, user: User, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(effective_role(store, user), frozenset())


def is_admin(user: User) -> bool:
    return user.role in STATIC_ROLES


def election_candidates(store: EntityStore, election_id: str) -> list[User]:
    """Users holding an approved, enabled candidacy in the election."""
    users: list[User] = []
    for app in store.applications.find_all(
        lambda a: a.election_id == election_id and a.approved and is_enabled(a)
    ):
        user = store.users.find_by_id(app.user_id)
        if user is not None:
            users.append(user)
    return users


def approved_candidate_count(store: EntityStore, election_id: str) -> int:
    return store.applications.count(
        lambda a: a.election_id == election_id and a.approved and is_enabled(a)
    )


def voter_count(store: EntityStore, election_id: str) -> int:
    return len({v.voter_id for v in store.votes.find_all(lambda v: v.election_id == election_id)})


def has_voted(store: EntityStore, user_id: str, election_id: str) -> bool:
    return store.votes.find_one(
        lambda v: v.voter_id == user_id and v.election_id == election_id
    ) is not None


def votable_elections(store: EntityStore, user: User) -> list[Election]:
    """Active elections *user* may still cast a vote in."""
    if not user.approved or not has_permission(store, user, Permission.vote):
        return []
    return store.elections.find_all(
        lambda e: e.active and not has_voted(store, user.id, e.id)
    )


def applicable_elections(store: EntityStore, user: User) -> list[Election]:
    """Active elections *user* may still apply to as a candidate."""
    if not user.approved or not has_permission(store, user, Permission.apply_candidacy):
        return []
    applied = {a.election_id for a in store.applications.find_all(lambda a: a.user_id == user.id)}
    return store.elections.find_all(
        lambda e: e.active
        and e.id not in applied
        and approved_candidate_count(store, e.id) < e.max_candidates
    )


def authorize(store: EntityStore, actor_id: str, permission: Permission) -> CommandResult[User]:
    """Resolve *actor_id* and check its effective role grants *permission*."""
    actor = store.users.find_by_id(actor_id)
    if actor is None:
        return CommandResult.failure(ErrorKind.not_found, f"User {actor_id} not found")
    if not actor.approved or not has_permission(store, actor, permission):
        return CommandResult.failure(
            ErrorKind.unauthorized,
            f"User {actor.username} lacks permission {permission.value}",
        )
    return CommandResult.success(actor)
