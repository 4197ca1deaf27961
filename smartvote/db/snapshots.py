"""Whole-table snapshot persistence adapters.

The entity store reads and writes complete tables through a key-value
interface keyed by table name (``users``, ``elections``, ``applications``,
``votes``, ``notifications``).  The only contract is that the rows written
for a key are the rows read back for it.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from smartvote.core.config import settings
from smartvote.db.supabase import get_supabase

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


class SnapshotStore(Protocol):
    """Key-value persistence for whole-table snapshots."""

    name: str

    def read(self, key: str) -> Rows | None:
        """Return the rows stored under *key*, or None if never written."""
        ...

    def write(self, key: str, rows: Rows) -> None:
        ...


class MemorySnapshotStore:
    """Process-local snapshots; lost on restart."""

    name = "memory"

    def __init__(self) -> None:
        self._data: dict[str, Rows] = {}

    def read(self, key: str) -> Rows | None:
        rows = self._data.get(key)
        return [dict(row) for row in rows] if rows is not None else None

    def write(self, key: str, rows: Rows) -> None:
        self._data[key] = [dict(row) for row in rows]


class FileSnapshotStore:
    """One JSON document per table inside ``directory``."""

    name = "file"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Rows | None:
        path = self._path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def write(self, key: str, rows: Rows) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(rows, fh, ensure_ascii=False, indent=2)
        tmp.replace(path)


class SupabaseSnapshotStore:
    """Snapshots kept in a Supabase key/value table.

    Expected schema: ``key text primary key, rows jsonb, updated_at timestamptz``.
    """

    name = "supabase"

    def __init__(self, table: str | None = None) -> None:
        self.table = table or settings.SUPABASE_SNAPSHOT_TABLE

    def read(self, key: str) -> Rows | None:
        client = get_supabase()
        result = (
            client.table(self.table)
            .select("rows")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0].get("rows") or []

    def write(self, key: str, rows: Rows) -> None:
        client = get_supabase()
        client.table(self.table).upsert(
            {
                "key": key,
                "rows": rows,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="key",
        ).execute()


def create_snapshot_store(backend: str | None = None) -> SnapshotStore:
    """Build the adapter named by *backend* (default: ``settings.PERSISTENCE_BACKEND``)."""
    backend = (backend or settings.PERSISTENCE_BACKEND).strip().lower()
    if backend == "memory":
        return MemorySnapshotStore()
    if backend == "file":
        return FileSnapshotStore(settings.SNAPSHOT_DIR)
    if backend == "supabase":
        return SupabaseSnapshotStore()
    raise ValueError(f"Unknown persistence backend: {backend}")
