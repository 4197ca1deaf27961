"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events (service context,
APScheduler snapshot flushing) and router registration.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartvote.core.config import settings
from smartvote.core.logging import setup_logging
from smartvote.routers import applications, elections, export, health, notifications, users, votes
from smartvote.scheduler.jobs import flush_snapshots, shutdown_scheduler, start_scheduler
from smartvote.services.context import get_context

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Load (or seed) the service context, run the scheduler, flush on exit."""
    setup_logging()
    logger.info("Application starting up")
    get_context()
    start_scheduler()
    yield
    shutdown_scheduler()
    flush_snapshots()
    logger.info("Application shutting down")


app = FastAPI(
    title="SmartVote Election Service",
    description="Election lifecycle, candidacy, eligibility and voting backend",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["Content-Type", "X-User-Id"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(elections.router, prefix="/api/v1/elections", tags=["Elections"])
app.include_router(applications.router, prefix="/api/v1/applications", tags=["Applications"])
app.include_router(votes.router, prefix="/api/v1/votes", tags=["Votes"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(export.router, prefix="/api/v1/export", tags=["Export"])
