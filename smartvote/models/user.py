"""Pydantic models for the ``users`` table and account payloads."""

from datetime import datetime

from pydantic import Field

from smartvote.models.base import CamelModel
from smartvote.models.enums import Role


class User(CamelModel):
    """Full user record as held by the entity store."""
    id: str
    username: str
    credential_hash: str
    role: Role = Role.voter
    approved: bool = False
    branch: str = ""
    registration_id: str
    email: str | None = None
    created_at: datetime
    bio: str | None = None
    phone: str | None = None
    year: str | None = None
    achievements: str | None = None
    face_registered: bool = False
    fingerprint_registered: bool = False


class UserPublic(CamelModel):
    """User projection safe to return to callers (no credential hash)."""
    id: str
    username: str
    role: Role
    approved: bool
    branch: str = ""
    registration_id: str
    email: str | None = None
    created_at: datetime
    bio: str | None = None
    phone: str | None = None
    year: str | None = None
    achievements: str | None = None
    face_registered: bool = False
    fingerprint_registered: bool = False


class UserRegister(CamelModel):
    """Payload for self-registration."""
    username: str = Field(min_length=1, max_length=64)
    credential_secret: str = Field(min_length=1)
    registration_id: str = Field(min_length=1, max_length=32)
    branch: str = ""
    role: Role = Role.voter
    face_registered: bool = False
    fingerprint_registered: bool = False


class UserLogin(CamelModel):
    username: str
    credential_secret: str


class ProfileUpdate(CamelModel):
    """Editable profile fields; ``None`` leaves a field untouched."""
    branch: str | None = None
    bio: str | None = None
    phone: str | None = None
    year: str | None = None
    achievements: str | None = None


class RoleView(CamelModel):
    """Static and effective role of a user."""
    user_id: str
    role: Role
    effective_role: Role
