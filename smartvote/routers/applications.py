"""Candidacy endpoints: apply, promote, review, access toggle and removal."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Query

from smartvote.core.errors import unwrap
from smartvote.models.application import (
    Application,
    ApplicationCreate,
    PromotionCreate,
    RejectionCreate,
)
from smartvote.routers.deps import ActorId, Context
from smartvote.services import candidacy

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Application])
async def list_applications(
    ctx: Context,
    election_id: str | None = Query(default=None, alias="electionId"),
    user_id: str | None = Query(default=None, alias="userId"),
    pending: bool = Query(default=False, description="Only unreviewed applications"),
) -> list[Application]:
    return candidacy.list_applications(
        ctx, election_id=election_id, user_id=user_id, pending_only=pending
    )


@router.post("", status_code=201, response_model=Application)
async def apply_to_election(
    payload: ApplicationCreate,
    actor_id: ActorId,
    ctx: Context,
) -> Application:
    """The acting voter applies to become a candidate."""
    return unwrap(candidacy.apply(ctx, actor_id, payload))


@router.post("/promote", status_code=201, response_model=Application)
async def promote_voter(
    payload: PromotionCreate,
    actor_id: ActorId,
    ctx: Context,
) -> Application:
    """Admin creates a pre-approved candidacy for a voter."""
    return unwrap(
        candidacy.promote(ctx, actor_id, payload.user_id, payload.election_id, payload.message)
    )


@router.post("/{application_id}/approve", response_model=Application)
async def approve_application(application_id: str, actor_id: ActorId, ctx: Context) -> Application:
    return unwrap(candidacy.approve(ctx, actor_id, application_id))


@router.post("/{application_id}/reject", response_model=Application)
async def reject_application(
    application_id: str,
    payload: RejectionCreate,
    actor_id: ActorId,
    ctx: Context,
) -> Application:
    return unwrap(candidacy.reject(ctx, actor_id, application_id, payload.reason))


@router.post("/{application_id}/toggle-access", response_model=Application)
async def toggle_access(application_id: str, actor_id: ActorId, ctx: Context) -> Application:
    return unwrap(candidacy.toggle_candidate_access(ctx, actor_id, application_id))


@router.delete("/{application_id}")
async def remove_candidate(application_id: str, actor_id: ActorId, ctx: Context) -> dict[str, Any]:
    """Remove the candidate; votes cast for them in that election are deleted too."""
    removed = unwrap(candidacy.remove_candidate(ctx, actor_id, application_id))
    return {"applicationId": application_id, "votesRemoved": removed}
