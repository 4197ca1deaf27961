"""Response models for the data export endpoint.

Read-only projection of every table plus a summary block; no vote is linked
back to its voter.
"""

from datetime import datetime

from smartvote.models.application import Application
from smartvote.models.base import CamelModel
from smartvote.models.election import Election
from smartvote.models.user import UserPublic


class ExportedApplication(Application):
    candidate_name: str | None = None
    election_name: str | None = None


class ExportedVote(CamelModel):
    election_id: str
    election_name: str | None = None
    candidate_id: str
    candidate_name: str | None = None
    voted_at: datetime
    receipt_id: str


class ExportSummary(CamelModel):
    total_elections: int = 0
    active_elections: int = 0
    total_votes: int = 0
    total_candidates: int = 0
    exported_at: datetime


class ExportPayload(CamelModel):
    users: list[UserPublic] = []
    elections: list[Election] = []
    applications: list[ExportedApplication] = []
    votes: list[ExportedVote] = []
    summary: ExportSummary
