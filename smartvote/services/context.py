"""Service context: the store, its persistence adapter and notifications.

Replaces process-wide mutable tables with one explicit object constructed
at startup (load snapshot or seed the bootstrap super-admin) and handed to
every command.  ``get_context()`` returns the lazily-built process singleton
used by the HTTP routers.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from uuid import uuid4

from smartvote.core.config import settings
from smartvote.db.snapshots import SnapshotStore, create_snapshot_store
from smartvote.models.enums import Role
from smartvote.models.user import User
from smartvote.services.credentials import hash_secret
from smartvote.services.notifications import NotificationCenter
from smartvote.services.store import EntityStore

logger = logging.getLogger(__name__)

BOOTSTRAP_ADMIN_ID = "super-admin-1"

_RECEIPT_ALPHABET = string.ascii_uppercase + string.digits


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:16]}"


class ServiceContext:
    """Everything a command needs: tables, persistence, clock, events."""

    def __init__(
        self,
        store: EntityStore,
        snapshots: SnapshotStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.snapshots = snapshots
        self.clock = clock
        self.notifications = NotificationCenter(store, clock)

    @contextmanager
    def command(self) -> Iterator[EntityStore]:
        """Serialize a mutating command against every other command."""
        with self.store.lock:
            yield self.store

    def now(self) -> datetime:
        return self.clock()

    def new_receipt_id(self) -> str:
        """Return an ``RCP-<epoch-ms>-<9 chars>`` id not used by any vote."""
        while True:
            stamp = int(self.now().timestamp() * 1000)
            suffix = "".join(secrets.choice(_RECEIPT_ALPHABET) for _ in range(9))
            receipt_id = f"RCP-{stamp}-{suffix}"
            if self.store.votes.find_one(lambda v: v.receipt_id == receipt_id) is None:
                return receipt_id

    def persist(self, *tables: str) -> None:
        """Write the named tables to the snapshot adapter.

        A failed write is logged; in-memory state stays authoritative and the
        scheduled flush retries every table.
        """
        names = tables or tuple(self.store.tables)
        snapshot = self.store.snapshot(*names)
        for name, rows in snapshot.items():
            try:
                self.snapshots.write(name, rows)
            except Exception as exc:
                logger.error(
                    "snapshot_write_failed",
                    extra={
                        "table": name,
                        "backend": self.snapshots.name,
                        "error_message": str(exc),
                    },
                )

    def flush(self) -> int:
        """Persist every table; returns the number of tables written.

        Holds the command lock for the writes too, so a command persisting
        newer rows can never be overwritten by an older snapshot.
        """
        with self.command() as store:
            snapshot = store.snapshot()
            for name, rows in snapshot.items():
                self.snapshots.write(name, rows)
        return len(snapshot)


def seed_bootstrap_admin(ctx: ServiceContext) -> User:
    """Create the super-admin account used to approve everybody else."""
    admin = User(
        id=BOOTSTRAP_ADMIN_ID,
        username=settings.BOOTSTRAP_ADMIN_USERNAME,
        credential_hash=hash_secret(settings.BOOTSTRAP_ADMIN_SECRET),
        role=Role.super_admin,
        approved=True,
        branch="Administration",
        registration_id=settings.BOOTSTRAP_ADMIN_REGISTRATION_ID,
        email=f"{settings.BOOTSTRAP_ADMIN_USERNAME}@college.edu",
        created_at=ctx.now(),
    )
    ctx.store.users.insert(admin)
    ctx.persist("users")
    logger.info("bootstrap_admin_seeded", extra={"user_id": admin.id})
    return admin


def build_context(
    snapshots: SnapshotStore | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> ServiceContext:
    """Load every table from *snapshots* and seed the admin if no users exist."""
    snapshots = snapshots or create_snapshot_store()
    store = EntityStore()
    store.load_snapshot({name: snapshots.read(name) for name in store.tables})
    ctx = ServiceContext(store, snapshots, clock)
    if len(store.users) == 0:
        seed_bootstrap_admin(ctx)
    logger.info(
        "context_ready",
        extra={
            "backend": snapshots.name,
            "users": len(store.users),
            "elections": len(store.elections),
        },
    )
    return ctx


_context: ServiceContext | None = None


def get_context() -> ServiceContext:
    """Return the singleton service context, building it on first call."""
    global _context
    if _context is None:
        _context = build_context()
    return _context


def reset_context(ctx: ServiceContext | None = None) -> None:
    """Replace (or drop) the singleton; used by tests and the app lifespan."""
    global _context
    _context = ctx
