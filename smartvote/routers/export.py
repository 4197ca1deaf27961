"""Data export endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from smartvote.core.errors import unwrap
from smartvote.models.export import ExportPayload
from smartvote.routers.deps import ActorId, Context
from smartvote.services import export

router = APIRouter()


@router.get("", response_model=ExportPayload)
async def export_election_data(actor_id: ActorId, ctx: Context) -> ExportPayload:
    """Download every table plus summary counts (administrators only)."""
    return unwrap(export.export_data(ctx, actor_id))
