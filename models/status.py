"""
Review workflow status - one set shared by papers and reviews.
"""

from enum import Enum


class ReviewStatus(str, Enum):
    """Lifecycle states for papers and reviews."""
    PENDING = "PENDING"                         # Submitted, no reviewers yet
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    IN_PROGRESS = "IN_PROGRESS"                 # At least one reviewer assigned
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    REVISIONS_REQUIRED = "REVISIONS_REQUIRED"
    COMPLETED = "COMPLETED"                     # Default for a submitted review

    @classmethod
    def decisions(cls) -> tuple["ReviewStatus", ...]:
        """Outcomes an admin can hand down on a reviewed paper."""
        return (cls.ACCEPTED, cls.REJECTED, cls.REVISIONS_REQUIRED)

    @classmethod
    def parse(cls, value: "ReviewStatus | str") -> "ReviewStatus":
        """Accept an enum member or its name, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown status '{value}' (expected one of: {valid})") from None
