"""
Review - one reviewer's verdict on one paper.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from .base import ANONYMOUS, BaseEntity, new_id
from .status import ReviewStatus

MIN_RATING = 1
MAX_RATING = 5


def clamp_rating(rating: int) -> int:
    """Pull a rating into [MIN_RATING, MAX_RATING]."""
    return max(MIN_RATING, min(MAX_RATING, rating))


class Review(BaseEntity):
    """
    A submitted review.

    Ratings outside 1-5 are clamped, not rejected - on construction and on
    every later assignment.
    """
    review_id: str = Field(default_factory=new_id, frozen=True)
    paper_id: str = Field(frozen=True)
    reviewer_id: str = Field(frozen=True)
    reviewer_name: str = Field(frozen=True)
    submission_date: datetime = Field(default_factory=datetime.now, frozen=True)

    rating: int
    comments: str = ""
    status: ReviewStatus = ReviewStatus.COMPLETED

    @property
    def entity_id(self) -> str:
        return self.review_id

    @field_validator("rating")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return clamp_rating(value)

    @property
    def is_blinded(self) -> bool:
        return self.reviewer_id == ANONYMOUS

    def revise(self, rating: Optional[int] = None, comments: Optional[str] = None) -> None:
        if rating is not None:
            self.rating = rating
        if comments is not None:
            self.comments = comments
        self.touch()

    def blinded_copy(self) -> "Review":
        """Copy with the reviewer's identity removed, for authors."""
        return self.model_copy(
            update={"reviewer_id": ANONYMOUS, "reviewer_name": ANONYMOUS},
            deep=True,
        )
