"""Vote endpoints: cast and receipt lookup."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from smartvote.core.errors import unwrap
from smartvote.models.vote import Vote, VoteCreate, VoteReceipt
from smartvote.routers.deps import ActorId, Context
from smartvote.services import voting

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201, response_model=Vote)
async def cast_vote(payload: VoteCreate, actor_id: ActorId, ctx: Context) -> Vote:
    """Cast the acting user's vote; ``candidateId`` may be ``none-of-above``."""
    return unwrap(voting.cast_vote(ctx, actor_id, payload.election_id, payload.candidate_id))


@router.get("/receipts/{receipt_id}", response_model=VoteReceipt)
async def get_receipt(receipt_id: str, ctx: Context) -> VoteReceipt:
    return unwrap(voting.get_receipt(ctx, receipt_id))
