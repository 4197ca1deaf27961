"""APScheduler job definitions and scheduler management.

Initializes a BackgroundScheduler with an IntervalTrigger that flushes every
table of the service context to the persistence adapter, and provides
start/shutdown/status helpers for the FastAPI lifespan.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from smartvote.core.config import settings
from smartvote.scheduler.lock import acquire_flush_lock, release_flush_lock
from smartvote.services.context import get_context, utcnow

logger = logging.getLogger(__name__)

# Module-level scheduler instance (singleton)
scheduler = BackgroundScheduler()


def flush_snapshots() -> dict[str, Any]:
    """Write every table of the current context to its snapshot adapter."""
    if not acquire_flush_lock(utcnow()):
        logger.warning("Snapshot flush already running, skipping tick")
        return {"status": "skipped", "reason": "flush_already_running"}

    start_time = time.time()
    try:
        ctx = get_context()
        tables = ctx.flush()
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "snapshot_flush_complete",
            extra={
                "backend": ctx.snapshots.name,
                "tables": tables,
                "duration_ms": duration_ms,
            },
        )
        return {"status": "success", "tables": tables, "duration_ms": duration_ms}
    except Exception as exc:
        logger.error("snapshot_flush_failed", extra={"error_message": str(exc)})
        return {"status": "failed", "error": str(exc)}
    finally:
        release_flush_lock()


def start_scheduler() -> None:
    """Add the flush job with SNAPSHOT_INTERVAL_SECONDS and start the scheduler."""
    scheduler.add_job(
        flush_snapshots,
        IntervalTrigger(seconds=settings.SNAPSHOT_INTERVAL_SECONDS),
        id="snapshot_flush",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "scheduler_started",
        extra={"interval_seconds": settings.SNAPSHOT_INTERVAL_SECONDS},
    )


def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def is_scheduler_running() -> bool:
    """Check if the scheduler is currently running."""
    return scheduler.running
