"""Account endpoints: registration, login, approval, profile and roles."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from smartvote.core.errors import unwrap
from smartvote.models.application import Application
from smartvote.models.election import EligibleElections
from smartvote.models.user import ProfileUpdate, RoleView, UserLogin, UserPublic, UserRegister
from smartvote.routers.deps import ActorId, Context
from smartvote.services import accounts

logger = logging.getLogger(__name__)

router = APIRouter()


def _public(user) -> UserPublic:
    return UserPublic.model_validate(user)


# ---------------------------------------------------------------------------
# Registration & login
# ---------------------------------------------------------------------------

@router.post("/register", status_code=201, response_model=UserPublic)
async def register_user(payload: UserRegister, ctx: Context) -> UserPublic:
    """Create an account pending administrator approval."""
    return _public(unwrap(accounts.register(ctx, payload)))


@router.post("/login", response_model=UserPublic)
async def login_user(payload: UserLogin, ctx: Context) -> UserPublic:
    """Verify credentials; the returned ``id`` is sent back as ``X-User-Id``."""
    return _public(unwrap(accounts.login(ctx, payload.username, payload.credential_secret)))


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------

@router.get("", response_model=list[UserPublic])
async def list_users(
    actor_id: ActorId,
    ctx: Context,
    pending: bool = Query(default=False, description="Only accounts awaiting approval"),
) -> list[UserPublic]:
    return [_public(u) for u in unwrap(accounts.list_users(ctx, actor_id, pending_only=pending))]


@router.post("/{user_id}/approve", response_model=UserPublic)
async def approve_user(user_id: str, actor_id: ActorId, ctx: Context) -> UserPublic:
    return _public(unwrap(accounts.approve_user(ctx, actor_id, user_id)))


@router.post("/{user_id}/reject", response_model=UserPublic)
async def reject_user(user_id: str, actor_id: ActorId, ctx: Context) -> UserPublic:
    """Reject a pending registration (the account is removed)."""
    return _public(unwrap(accounts.reject_user(ctx, actor_id, user_id)))


@router.delete("/{user_id}", response_model=UserPublic)
async def delete_user(user_id: str, actor_id: ActorId, ctx: Context) -> UserPublic:
    return _public(unwrap(accounts.delete_user(ctx, actor_id, user_id)))


# ---------------------------------------------------------------------------
# Profile & eligibility
# ---------------------------------------------------------------------------

@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: str, ctx: Context) -> UserPublic:
    return _public(unwrap(accounts.get_user(ctx, user_id)))


@router.patch("/{user_id}/profile", response_model=UserPublic)
async def update_profile(
    user_id: str,
    payload: ProfileUpdate,
    actor_id: ActorId,
    ctx: Context,
) -> UserPublic:
    if actor_id != user_id:
        raise HTTPException(status_code=403, detail="Users can only edit their own profile")
    return _public(unwrap(accounts.update_profile(ctx, user_id, payload)))


@router.get("/{user_id}/role", response_model=RoleView)
async def user_role(user_id: str, ctx: Context) -> RoleView:
    """Static role and the effective role derived from active candidacies."""
    return unwrap(accounts.role_view(ctx, user_id))


@router.get("/{user_id}/candidacies", response_model=list[Application])
async def user_candidacies(user_id: str, ctx: Context) -> list[Application]:
    return unwrap(accounts.candidacies(ctx, user_id))


@router.get("/{user_id}/eligible-elections", response_model=EligibleElections)
async def user_eligible_elections(user_id: str, ctx: Context) -> EligibleElections:
    return unwrap(accounts.eligible_elections(ctx, user_id))
