"""
Paper - a submitted manuscript and its reviewer assignments.
"""

from datetime import datetime
from pydantic import Field, field_validator, model_validator

from .base import ANONYMOUS, BaseEntity, new_id
from .status import ReviewStatus


class Paper(BaseEntity):
    """
    A paper under peer review.

    keywords and reviewer_ids are tuples: callers can read them freely but
    never hold the live collection. Assigning any iterable stores a copy.
    The author can never appear among the reviewers.
    """
    # Identity (fixed at submission)
    paper_id: str = Field(default_factory=new_id, frozen=True)
    author_id: str = Field(frozen=True)
    author_name: str = Field(frozen=True)  # Snapshot at submission time
    submission_date: datetime = Field(default_factory=datetime.now, frozen=True)

    # Editable content
    title: str = Field(min_length=1)
    abstract_text: str = ""
    content: str = ""
    keywords: tuple[str, ...] = ()

    # Review workflow
    reviewer_ids: tuple[str, ...] = ()
    status: ReviewStatus = ReviewStatus.PENDING

    @property
    def entity_id(self) -> str:
        return self.paper_id

    @property
    def is_blinded(self) -> bool:
        return self.author_id == ANONYMOUS

    @field_validator("keywords", mode="before")
    @classmethod
    def _clean_keywords(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        return tuple(k.strip() for k in value if k and k.strip())

    @field_validator("reviewer_ids", mode="before")
    @classmethod
    def _dedupe_reviewers(cls, value):
        if value is None:
            return ()
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _author_never_reviews(self) -> "Paper":
        if self.author_id in self.reviewer_ids:
            raise ValueError("A paper's author cannot be one of its reviewers")
        return self

    def has_reviewer(self, reviewer_id: str) -> bool:
        return reviewer_id in self.reviewer_ids

    def assign_reviewer(self, reviewer_id: str) -> bool:
        """Add a reviewer. Returns False for the author or a repeat."""
        if reviewer_id == self.author_id or reviewer_id in self.reviewer_ids:
            return False
        self.reviewer_ids = self.reviewer_ids + (reviewer_id,)
        self.touch()
        return True

    def remove_reviewer(self, reviewer_id: str) -> bool:
        if reviewer_id not in self.reviewer_ids:
            return False
        self.reviewer_ids = tuple(r for r in self.reviewer_ids if r != reviewer_id)
        self.touch()
        return True

    def set_status(self, status: ReviewStatus) -> None:
        self.status = status
        self.touch()

    def matches_keyword(self, term: str) -> bool:
        """Case-insensitive substring match against any keyword."""
        needle = term.lower()
        return any(needle in k.lower() for k in self.keywords)

    def blinded_copy(self) -> "Paper":
        """Copy with the author's identity removed, for reviewers."""
        return self.model_copy(
            update={"author_id": ANONYMOUS, "author_name": ANONYMOUS},
            deep=True,
        )
