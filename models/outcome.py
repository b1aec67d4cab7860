"""
Outcome - the result of a workflow operation.

Expected failures (missing records, duplicates, permission problems) come
back as a falsy Outcome with a reason, never as an exception.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class FailureKind(str, Enum):
    """Why an operation was refused."""
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"


class Outcome(BaseModel):
    """Truthy on success, falsy on failure."""
    model_config = ConfigDict(frozen=True)

    ok: bool
    kind: Optional[FailureKind] = None
    reason: str = ""
    value: Optional[str] = None  # e.g. id of the created entity

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Optional[str] = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def not_found(cls, reason: str) -> "Outcome":
        return cls(ok=False, kind=FailureKind.NOT_FOUND, reason=reason)

    @classmethod
    def conflict(cls, reason: str) -> "Outcome":
        return cls(ok=False, kind=FailureKind.CONFLICT, reason=reason)

    @classmethod
    def forbidden(cls, reason: str) -> "Outcome":
        return cls(ok=False, kind=FailureKind.FORBIDDEN, reason=reason)
