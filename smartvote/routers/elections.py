"""Election endpoints: lifecycle, limits, history, candidates and results."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from smartvote.core.errors import unwrap
from smartvote.models.election import Election, ElectionCreate, ElectionHistory, LimitsUpdate
from smartvote.models.user import UserPublic
from smartvote.models.vote import ElectionResults
from smartvote.routers.deps import ActorId, Context
from smartvote.services import eligibility, elections, voting

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201, response_model=Election)
async def create_election(payload: ElectionCreate, actor_id: ActorId, ctx: Context) -> Election:
    return unwrap(elections.create_election(ctx, actor_id, payload))


@router.get("", response_model=list[Election])
async def list_elections(
    ctx: Context,
    active: bool | None = Query(default=None, description="Filter by active state"),
) -> list[Election]:
    return elections.list_elections(ctx, active=active)


@router.get("/{election_id}", response_model=Election)
async def get_election(election_id: str, ctx: Context) -> Election:
    return unwrap(elections.get_election(ctx, election_id))


@router.post("/{election_id}/toggle", response_model=Election)
async def toggle_election(election_id: str, actor_id: ActorId, ctx: Context) -> Election:
    """Close an active election or reopen a closed one."""
    return unwrap(elections.toggle_election(ctx, actor_id, election_id))


@router.post("/{election_id}/close", response_model=Election)
async def close_election(election_id: str, actor_id: ActorId, ctx: Context) -> Election:
    return unwrap(elections.close_election(ctx, actor_id, election_id))


@router.post("/{election_id}/reopen", response_model=Election)
async def reopen_election(election_id: str, actor_id: ActorId, ctx: Context) -> Election:
    """Reactivate the election; candidacies ended by the close stay inactive."""
    return unwrap(elections.reopen_election(ctx, actor_id, election_id))


@router.patch("/{election_id}/limits", response_model=Election)
async def update_limits(
    election_id: str,
    payload: LimitsUpdate,
    actor_id: ActorId,
    ctx: Context,
) -> Election:
    return unwrap(elections.update_limits(ctx, actor_id, election_id, payload.field, payload.value))


@router.delete("/{election_id}", response_model=Election)
async def delete_election(election_id: str, actor_id: ActorId, ctx: Context) -> Election:
    """Delete the election together with its applications and votes."""
    return unwrap(elections.delete_election(ctx, actor_id, election_id))


@router.get("/{election_id}/history", response_model=ElectionHistory)
async def election_history(election_id: str, ctx: Context) -> ElectionHistory:
    return unwrap(elections.election_history(ctx, election_id))


@router.get("/{election_id}/candidates", response_model=list[UserPublic])
async def election_candidates(election_id: str, ctx: Context) -> list[UserPublic]:
    unwrap(elections.get_election(ctx, election_id))
    return [
        UserPublic.model_validate(user)
        for user in eligibility.election_candidates(ctx.store, election_id)
    ]


@router.get("/{election_id}/results", response_model=ElectionResults)
async def election_results(election_id: str, ctx: Context) -> ElectionResults:
    """Ranked tally; results of closed elections remain available."""
    return unwrap(voting.election_results(ctx, election_id))
