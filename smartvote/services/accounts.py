"""Account commands: registration, approval, login, profile and deletion.

New accounts start unapproved and cannot log in until an administrator
approves them; the bootstrap super-admin is the only account created
approved.  Rejecting a registration deletes it outright.
"""

from __future__ import annotations

import logging

from smartvote.core.errors import CommandResult, ErrorKind
from smartvote.models.application import Application
from smartvote.models.election import EligibleElections
from smartvote.models.enums import NotificationType, Permission, Role
from smartvote.models.user import ProfileUpdate, RoleView, User, UserRegister
from smartvote.services import eligibility
from smartvote.services.context import ServiceContext, new_id
from smartvote.services.credentials import hash_secret, verify_secret

logger = logging.getLogger(__name__)

REGISTRABLE_ROLES = (Role.voter, Role.admin)


def register(ctx: ServiceContext, payload: UserRegister) -> CommandResult[User]:
    """Create an unapproved account."""
    if payload.role not in REGISTRABLE_ROLES:
        return CommandResult.failure(
            ErrorKind.unauthorized, f"Role {payload.role.value} cannot be self-registered"
        )

    with ctx.command() as store:
        username = payload.username.strip()
        registration_id = payload.registration_id.strip()
        if store.users.find_one(
            lambda u: u.username == username or u.registration_id == registration_id
        ):
            return CommandResult.failure(
                ErrorKind.conflict, "Username or registration id already exists"
            )

        user = User(
            id=new_id("user"),
            username=username,
            credential_hash=hash_secret(payload.credential_secret),
            role=payload.role,
            approved=False,
            branch=payload.branch,
            registration_id=registration_id,
            email=f"{username}@college.edu",
            created_at=ctx.now(),
            face_registered=payload.face_registered,
            fingerprint_registered=payload.fingerprint_registered,
        )
        store.users.insert(user)
        ctx.notifications.emit(
            NotificationType.user_registered,
            "New Registration",
            f"{user.username} registered as {user.role.value} and awaits approval",
        )
        ctx.persist("users", "notifications")

    logger.info("user_registered", extra={"user_id": user.id, "role": user.role.value})
    return CommandResult.success(user)


def login(ctx: ServiceContext, username: str, credential_secret: str) -> CommandResult[User]:
    """Check credentials; unapproved accounts (other than super-admin) are refused."""
    user = ctx.store.users.find_one(lambda u: u.username == username)
    if user is None or not verify_secret(credential_secret, user.credential_hash):
        logger.warning("login_failed", extra={"username": username})
        return CommandResult.failure(ErrorKind.unauthorized, "Invalid username or credential")
    if not user.approved and user.role != Role.super_admin:
        return CommandResult.failure(ErrorKind.unauthorized, "Account is pending approval")
    logger.info("login_succeeded", extra={"user_id": user.id})
    return CommandResult.success(user)


def approve_user(ctx: ServiceContext, admin_id: str, user_id: str) -> CommandResult[User]:
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.approve_users)
        if not check.ok:
            return check
        user = store.users.find_by_id(user_id)
        if user is None:
            return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
        # Admin accounts can only be vouched for by a super-admin
        if user.role == Role.admin:
            check = eligibility.authorize(store, admin_id, Permission.manage_users)
            if not check.ok:
                return check
        if user.approved:
            return CommandResult.failure(ErrorKind.already_resolved, f"{user.username} is already approved")

        user = store.users.update(user_id, {"approved": True})
        ctx.notifications.emit(
            NotificationType.user_approved,
            "Account Approved",
            "Your account has been approved",
            user_id=user_id,
        )
        ctx.persist("users", "notifications")
    return CommandResult.success(user)


def reject_user(ctx: ServiceContext, admin_id: str, user_id: str) -> CommandResult[User]:
    """Refuse a pending registration by deleting the account."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.approve_users)
        if not check.ok:
            return check
        user = store.users.find_by_id(user_id)
        if user is None:
            return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
        if user.approved:
            return CommandResult.failure(ErrorKind.already_resolved, f"{user.username} is already approved")
        store.delete_user(user_id)
        ctx.persist("users", "applications", "votes")
    logger.info("user_rejected", extra={"user_id": user_id, "admin_id": admin_id})
    return CommandResult.success(user)


def delete_user(ctx: ServiceContext, admin_id: str, user_id: str) -> CommandResult[User]:
    """Delete an account with its applications and votes; super-admins are protected."""
    with ctx.command() as store:
        check = eligibility.authorize(store, admin_id, Permission.manage_users)
        if not check.ok:
            return check
        user = store.users.find_by_id(user_id)
        if user is None:
            return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
        if user.role == Role.super_admin:
            return CommandResult.failure(
                ErrorKind.unauthorized, "Super admin accounts cannot be deleted"
            )
        store.delete_user(user_id)
        ctx.persist("users", "applications", "votes")
    logger.info("user_deleted", extra={"user_id": user_id, "admin_id": admin_id})
    return CommandResult.success(user)


def update_profile(ctx: ServiceContext, user_id: str, patch: ProfileUpdate) -> CommandResult[User]:
    with ctx.command() as store:
        if user_id not in store.users:
            return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
        changes = patch.model_dump(exclude_none=True)
        user = store.users.update(user_id, changes)
        if changes:
            ctx.persist("users")
    return CommandResult.success(user)


def list_users(ctx: ServiceContext, admin_id: str, pending_only: bool = False) -> CommandResult[list[User]]:
    check = eligibility.authorize(ctx.store, admin_id, Permission.approve_users)
    if not check.ok:
        return check
    users = ctx.store.users.find_all(lambda u: not pending_only or not u.approved)
    return CommandResult.success(users)


def role_view(ctx: ServiceContext, user_id: str) -> CommandResult[RoleView]:
    user = ctx.store.users.find_by_id(user_id)
    if user is None:
        return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
    return CommandResult.success(
        RoleView(
            user_id=user.id,
            role=user.role,
            effective_role=eligibility.effective_role(ctx.store, user),
        )
    )


def get_user(ctx: ServiceContext, user_id: str) -> CommandResult[User]:
    user = ctx.store.users.find_by_id(user_id)
    if user is None:
        return CommandResult.failure(ErrorKind.not_found, f"User {user_id} not found")
    return CommandResult.success(user)


def candidacies(ctx: ServiceContext, user_id: str) -> CommandResult[list[Application]]:
    """Candidacies currently granting *user_id* the candidate role."""
    found = get_user(ctx, user_id)
    if not found.ok:
        return found
    return CommandResult.success(eligibility.active_candidacies(ctx.store, found.value))


def eligible_elections(ctx: ServiceContext, user_id: str) -> CommandResult[EligibleElections]:
    found = get_user(ctx, user_id)
    if not found.ok:
        return found
    user = found.value
    return CommandResult.success(
        EligibleElections(
            user_id=user.id,
            vote=eligibility.votable_elections(ctx.store, user),
            apply=eligibility.applicable_elections(ctx.store, user),
        )
    )
