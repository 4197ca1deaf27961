"""Enum types shared by entities, services and routers."""

from enum import Enum


class Role(str, Enum):
    """Static (stored) or effective user role."""
    voter = "voter"
    candidate = "candidate"
    admin = "admin"
    super_admin = "super-admin"


class Permission(str, Enum):
    """Capabilities granted by an effective role."""
    vote = "vote"
    apply_candidacy = "apply_candidacy"
    view_results = "view_results"
    manage_elections = "manage_elections"
    manage_candidates = "manage_candidates"
    approve_users = "approve_users"
    manage_users = "manage_users"
    export_data = "export_data"


class LimitField(str, Enum):
    """Election limits editable after creation."""
    max_candidates = "maxCandidates"
    max_voters = "maxVoters"


class NotificationType(str, Enum):
    """Structured event types emitted by service commands."""
    user_registered = "user-registered"
    user_approved = "user-approved"
    election_created = "election-created"
    election_closed = "election-closed"
    election_reopened = "election-reopened"
    candidacy_ended = "candidacy-ended"
    application_submitted = "application-submitted"
    application_approved = "application-approved"
    application_rejected = "application-rejected"
    candidate_promoted = "candidate-promoted"
    candidate_removed = "candidate-removed"
    vote_cast = "vote-cast"


NONE_OF_ABOVE = "none-of-above"
NONE_OF_ABOVE_LABEL = "None of the Above"
