"""Shared test fixtures.

Provides a fresh in-memory ``ServiceContext`` per test, factories for
approved voters and elections, a mock Supabase client and a FastAPI
``TestClient`` bound to the test context.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from smartvote.db.snapshots import MemorySnapshotStore
from smartvote.models.election import Election, ElectionCreate
from smartvote.models.user import User, UserRegister
from smartvote.services import accounts, elections
from smartvote.services.context import (
    BOOTSTRAP_ADMIN_ID,
    ServiceContext,
    build_context,
    reset_context,
)

VOTER_SECRET = "voter-secret-123"


@pytest.fixture()
def ctx() -> ServiceContext:
    """A fresh context backed by an in-memory snapshot store."""
    return build_context(MemorySnapshotStore())


@pytest.fixture()
def admin_id() -> str:
    """Id of the seeded bootstrap super-admin."""
    return BOOTSTRAP_ADMIN_ID


@pytest.fixture()
def make_voter(ctx: ServiceContext, admin_id: str) -> Callable[..., User]:
    """Return a factory registering (and by default approving) voters."""
    counter = itertools.count(1)

    def _make(username: str | None = None, approved: bool = True) -> User:
        n = next(counter)
        result = accounts.register(
            ctx,
            UserRegister(
                username=username or f"voter{n}",
                credential_secret=VOTER_SECRET,
                registration_id=f"PRN{n:04d}",
                branch="Computer Science",
            ),
        )
        assert result.ok, result.detail
        user = result.value
        if approved:
            user = accounts.approve_user(ctx, admin_id, user.id).value
        return user

    return _make


@pytest.fixture()
def make_election(ctx: ServiceContext, admin_id: str) -> Callable[..., Election]:
    """Return a factory creating elections through the lifecycle service."""
    counter = itertools.count(1)

    def _make(
        name: str | None = None,
        max_candidates: int = 5,
        max_voters: int = 100,
        active: bool = True,
    ) -> Election:
        result = elections.create_election(
            ctx,
            admin_id,
            ElectionCreate(
                name=name or f"Election {next(counter)}",
                max_candidates=max_candidates,
                max_voters=max_voters,
                active=active,
            ),
        )
        assert result.ok, result.detail
        return result.value

    return _make


def _chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in ("select", "upsert", "eq", "limit"):
        getattr(m, method).return_value = m
    return m


@pytest.fixture()
def mock_supabase() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` in the snapshot adapter with a chainable mock."""
    mock_client = MagicMock()
    mock_client.table.return_value = _chainable_table_mock()
    with patch("smartvote.db.snapshots.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def test_client(ctx: ServiceContext) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient serving the test context."""
    from smartvote.main import app

    reset_context(ctx)
    with patch("smartvote.main.start_scheduler"), patch("smartvote.main.shutdown_scheduler"):
        with TestClient(app) as client:
            yield client
    reset_context(None)
