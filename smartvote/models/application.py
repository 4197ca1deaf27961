"""Pydantic models for the ``applications`` (candidacy) table."""

from datetime import datetime

from smartvote.models.base import CamelModel


class Application(CamelModel):
    """Candidacy record linking a user to an election.

    ``active`` is unset on self-application and only becomes meaningful once
    the record is approved; anything but an explicit ``False`` counts as
    active.
    """
    id: str
    user_id: str
    election_id: str
    approved: bool = False
    rejected: bool = False
    active: bool | None = None
    election_closed: bool = False
    closed_at: datetime | None = None
    applied_at: datetime
    approved_at: datetime | None = None
    approved_by: str | None = None
    rejected_at: datetime | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None
    promoted_by: str | None = None
    promotion_message: str | None = None
    application_message: str | None = None
    qualifications: str | None = None
    goals: str | None = None

    @property
    def resolved(self) -> bool:
        return self.approved or self.rejected


class ApplicationCreate(CamelModel):
    """Payload for a voter applying to an election."""
    election_id: str
    application_message: str | None = None
    qualifications: str | None = None
    goals: str | None = None


class PromotionCreate(CamelModel):
    """Payload for an admin promoting a voter to candidate."""
    user_id: str
    election_id: str
    message: str | None = None


class RejectionCreate(CamelModel):
    reason: str = ""
