"""In-memory entity store.

Holds the five tables (users, elections, applications, votes,
notifications) and owns no business rules beyond referential cascades.
Mutating service commands run under ``EntityStore.lock`` so a cascade is
never observed half-applied.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from smartvote.models.application import Application
from smartvote.models.election import Election
from smartvote.models.notification import Notification
from smartvote.models.user import User
from smartvote.models.vote import Vote

M = TypeVar("M", bound=BaseModel)

Predicate = Callable[[M], bool]


class Table(Generic[M]):
    """Ordered id -> row mapping for a single entity type."""

    def __init__(self, name: str, model: type[M]) -> None:
        self.name = name
        self.model = model
        self._rows: dict[str, M] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[M]:
        return iter(list(self._rows.values()))

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._rows

    def insert(self, row: M) -> M:
        row_id = getattr(row, "id")
        if row_id in self._rows:
            raise ValueError(f"{self.name}: duplicate id {row_id}")
        self._rows[row_id] = row
        return row

    def find_by_id(self, row_id: str | None) -> M | None:
        if row_id is None:
            return None
        return self._rows.get(row_id)

    def find_all(self, predicate: Predicate[M] | None = None) -> list[M]:
        if predicate is None:
            return list(self._rows.values())
        return [row for row in self._rows.values() if predicate(row)]

    def find_one(self, predicate: Predicate[M]) -> M | None:
        return next((row for row in self._rows.values() if predicate(row)), None)

    def count(self, predicate: Predicate[M] | None = None) -> int:
        return len(self.find_all(predicate))

    def update(self, row_id: str, patch: dict[str, Any]) -> M | None:
        """Replace the row with a patched copy; returns None if *row_id* is unknown."""
        row = self._rows.get(row_id)
        if row is None:
            return None
        updated = row.model_copy(update=patch)
        self._rows[row_id] = updated
        return updated

    def delete(self, row_id: str) -> M | None:
        return self._rows.pop(row_id, None)

    def delete_where(self, predicate: Predicate[M]) -> list[M]:
        doomed = [row_id for row_id, row in self._rows.items() if predicate(row)]
        return [self._rows.pop(row_id) for row_id in doomed]

    def clear(self) -> None:
        self._rows.clear()

    # -- snapshot helpers --------------------------------------------------

    def to_rows(self) -> list[dict[str, Any]]:
        return [row.model_dump(mode="json", by_alias=True) for row in self._rows.values()]

    def load_rows(self, rows: list[dict[str, Any]]) -> None:
        self._rows = {}
        for raw in rows:
            row = self.model.model_validate(raw)
            self._rows[getattr(row, "id")] = row


class EntityStore:
    """The four core tables plus notifications, with cascading deletes."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users: Table[User] = Table("users", User)
        self.elections: Table[Election] = Table("elections", Election)
        self.applications: Table[Application] = Table("applications", Application)
        self.votes: Table[Vote] = Table("votes", Vote)
        self.notifications: Table[Notification] = Table("notifications", Notification)

    @property
    def tables(self) -> dict[str, Table[Any]]:
        return {
            table.name: table
            for table in (
                self.users,
                self.elections,
                self.applications,
                self.votes,
                self.notifications,
            )
        }

    # -- cascades ----------------------------------------------------------

    def delete_user(self, user_id: str) -> User | None:
        """Delete a user with their applications, their votes and votes cast for them."""
        with self.lock:
            user = self.users.delete(user_id)
            if user is None:
                return None
            self.applications.delete_where(lambda a: a.user_id == user_id)
            self.votes.delete_where(
                lambda v: v.voter_id == user_id or v.candidate_id == user_id
            )
            return user

    def delete_election(self, election_id: str) -> Election | None:
        """Delete an election together with its applications and votes."""
        with self.lock:
            election = self.elections.delete(election_id)
            if election is None:
                return None
            self.applications.delete_where(lambda a: a.election_id == election_id)
            self.votes.delete_where(lambda v: v.election_id == election_id)
            return election

    # -- snapshots ---------------------------------------------------------

    def snapshot(self, *names: str) -> dict[str, list[dict[str, Any]]]:
        """Return JSON-ready rows for the named tables (all when none given)."""
        with self.lock:
            selected = names or tuple(self.tables)
            return {name: self.tables[name].to_rows() for name in selected}

    def load_snapshot(self, data: dict[str, list[dict[str, Any]] | None]) -> None:
        with self.lock:
            for name, table in self.tables.items():
                rows = data.get(name)
                if rows is not None:
                    table.load_rows(rows)
