"""Pydantic models for the ``elections`` table."""

from datetime import datetime

from pydantic import Field

from smartvote.models.application import Application
from smartvote.models.base import CamelModel
from smartvote.models.enums import LimitField


class Election(CamelModel):
    """Full election record."""
    id: str
    name: str
    description: str = ""
    active: bool = True
    max_candidates: int
    max_voters: int
    created_at: datetime
    created_by: str | None = None
    closed_at: datetime | None = None


class ElectionCreate(CamelModel):
    """Payload for creating an election.

    Limits are validated by the service so that non-positive values surface
    as ``invalid_limit`` rather than a generic request validation error.
    """
    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    max_candidates: int = 10
    max_voters: int = 1000
    active: bool = True


class LimitsUpdate(CamelModel):
    field: LimitField
    value: int


class ElectionHistory(CamelModel):
    """An election with every application and its vote count."""
    election: Election
    applications: list[Application] = []
    total_votes: int = 0


class EligibleElections(CamelModel):
    """Elections a user may still vote in or apply to."""
    user_id: str
    vote: list[Election] = []
    apply: list[Election] = []
