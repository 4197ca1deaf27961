"""Pydantic models for the ``votes`` table, receipts and tallies."""

from datetime import datetime

from smartvote.models.base import CamelModel


class Vote(CamelModel):
    """Immutable vote record."""
    id: str
    voter_id: str
    election_id: str
    candidate_id: str
    voted_at: datetime
    receipt_id: str


class VoteCreate(CamelModel):
    election_id: str
    candidate_id: str


class VoteReceipt(CamelModel):
    """Externally presentable proof-of-cast."""
    receipt_id: str
    election_id: str
    election_name: str | None = None
    candidate_id: str
    candidate_name: str | None = None
    voter_ref: str
    voted_at: datetime
    status: str = "verified"


class TallyEntry(CamelModel):
    candidate_id: str
    candidate_name: str | None = None
    vote_count: int = 0


class ElectionResults(CamelModel):
    """Ranked results for one election."""
    election_id: str
    election_name: str
    active: bool
    total_votes: int = 0
    results: list[TallyEntry] = []
