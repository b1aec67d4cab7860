"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Every entity exposes entity_id, whatever its own id field is called
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import ANONYMOUS, BaseEntity, Identified, TimestampMixin, new_id
from .status import ReviewStatus
from .outcome import FailureKind, Outcome
from .user import Admin, Faculty, Student, User, UserBase, role_of
from .paper import Paper
from .review import MAX_RATING, MIN_RATING, Review, clamp_rating

__all__ = [
    # Base
    "ANONYMOUS",
    "BaseEntity",
    "Identified",
    "TimestampMixin",
    "new_id",
    # Workflow
    "ReviewStatus",
    "FailureKind",
    "Outcome",
    # Users
    "User",
    "UserBase",
    "Student",
    "Faculty",
    "Admin",
    "role_of",
    # Papers
    "Paper",
    # Reviews
    "Review",
    "clamp_rating",
    "MIN_RATING",
    "MAX_RATING",
]
