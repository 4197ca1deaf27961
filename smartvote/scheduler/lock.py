"""Snapshot flush lock using threading.Lock.

Prevents overlapping flushes when a slow persistence backend makes one
scheduler tick run into the next.  Uses a non-blocking acquire -- if the
lock is already held, the caller gets False and skips the tick.
"""

from __future__ import annotations

import threading
from datetime import datetime

_flush_lock = threading.Lock()
_flush_started_at: datetime | None = None


def acquire_flush_lock(started_at: datetime) -> bool:
    """Try to acquire the flush lock.

    Returns True if the lock was acquired, False if already held.
    """
    global _flush_started_at
    if _flush_lock.acquire(blocking=False):
        _flush_started_at = started_at
        return True
    return False


def release_flush_lock() -> None:
    """Release the flush lock.

    Safe to call even if the lock is not held.
    """
    global _flush_started_at
    _flush_started_at = None
    try:
        _flush_lock.release()
    except RuntimeError:
        pass  # Already released


def get_flush_started_at() -> datetime | None:
    """Return when the running flush started, or None."""
    return _flush_started_at


def is_flush_running() -> bool:
    return _flush_started_at is not None
