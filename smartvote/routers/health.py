"""Health check endpoint.

Returns service status including persistence connectivity, scheduler state
and table sizes.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from smartvote.routers.deps import Context
from smartvote.scheduler.jobs import is_scheduler_running

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(ctx: Context) -> Any:
    """Return health status; 503 when the persistence adapter cannot be read."""
    persistence_status = "disconnected"
    try:
        ctx.snapshots.read("users")
        persistence_status = "connected"
    except Exception:
        logger.warning("Health check: snapshot store unreachable", exc_info=True)

    payload: dict[str, Any] = {
        "status": "ok" if persistence_status == "connected" else "degraded",
        "persistence": persistence_status,
        "backend": ctx.snapshots.name,
        "scheduler": "running" if is_scheduler_running() else "stopped",
        "tables": {name: len(table) for name, table in ctx.store.tables.items()},
    }

    if persistence_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
