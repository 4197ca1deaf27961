"""Typed command outcomes.

Every service command returns a ``CommandResult``: either a success payload
or exactly one ``ErrorKind`` with a human-readable detail.  Commands validate
before they mutate, so a failed result never leaves partial state behind.
Routers turn failures into ``HTTPException`` via ``unwrap``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure reasons a command can report."""
    not_found = "not_found"
    duplicate_application = "duplicate_application"
    already_voted = "already_voted"
    already_resolved = "already_resolved"
    election_not_active = "election_not_active"
    invalid_limit = "invalid_limit"
    unauthorized = "unauthorized"
    conflict = "conflict"
    invalid_candidate = "invalid_candidate"
    limit_reached = "limit_reached"


ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.not_found: 404,
    ErrorKind.duplicate_application: 409,
    ErrorKind.already_voted: 409,
    ErrorKind.already_resolved: 409,
    ErrorKind.election_not_active: 409,
    ErrorKind.invalid_limit: 422,
    ErrorKind.unauthorized: 403,
    ErrorKind.conflict: 409,
    ErrorKind.invalid_candidate: 422,
    ErrorKind.limit_reached: 409,
}


class CommandResult(BaseModel, Generic[T]):
    """Discriminated outcome of a service command."""
    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> CommandResult[Any]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str) -> CommandResult[Any]:
        return cls(ok=False, error=error, detail=detail)


def unwrap(result: CommandResult[T]) -> T:
    """Return the success payload or raise the matching ``HTTPException``."""
    if result.ok:
        return result.value  # type: ignore[return-value]
    raise HTTPException(
        status_code=ERROR_STATUS[result.error],
        detail={"error": result.error.value, "detail": result.detail},
    )
