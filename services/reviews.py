"""
Review ledger - review submission, blinding and rating aggregation.
"""

from datetime import datetime
from typing import Callable, Optional

from models import Outcome, Review, UserBase, new_id
from repositories import EntityStore
from .papers import PaperLifecycle
from .users import UserDirectory


class ReviewLedger:
    """
    Reviews on top of a review store.

    At most one review exists per (paper, reviewer). Who sees reviewer
    identities is decided per call from the viewer passed in; only admins
    get unblinded reviews.
    """

    def __init__(
        self,
        store: EntityStore[Review],
        papers: PaperLifecycle,
        users: UserDirectory,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_id,
    ):
        self._store = store
        self._papers = papers
        self._users = users
        self._clock = clock
        self._new_id = id_factory

    # === Submission ===

    def submit_review(self, paper_id: str, reviewer_id: str,
                      rating: int, comments: str) -> Outcome:
        """
        Record a review from an assigned reviewer.

        Out-of-range ratings are clamped to 1-5.
        """
        paper = self._papers.find_paper_by_id(paper_id)
        if paper is None:
            return Outcome.not_found(f"Paper {paper_id} not found")
        reviewer = self._users.find_by_id(reviewer_id)
        if reviewer is None:
            return Outcome.not_found(f"Reviewer {reviewer_id} not found")
        if not paper.has_reviewer(reviewer_id):
            return Outcome.forbidden("You are not assigned to review this paper")

        with self._store.locked():
            if self.get_review_by_paper_and_reviewer(paper_id, reviewer_id) is not None:
                return Outcome.conflict("You have already reviewed this paper")

            review = Review(
                review_id=self._new_id(),
                paper_id=paper_id,
                reviewer_id=reviewer.user_id,
                reviewer_name=reviewer.name,
                rating=rating,
                comments=comments,
                submission_date=self._clock(),
            )
            if not self._store.save(review):
                return Outcome.conflict("Review already recorded")

        print(f"[Reviews] {reviewer.name} rated paper {paper_id}: {review.rating}")
        return Outcome.success(review.review_id)

    # === Queries ===

    def find_review_by_id(self, review_id: str) -> Optional[Review]:
        return self._store.find_by_id(review_id)

    def get_all_reviews(self) -> list[Review]:
        return self._store.find_all()

    def get_reviews_for_paper(self, paper_id: str,
                              viewer: Optional[UserBase] = None) -> list[Review]:
        """
        Reviews of a paper as the viewer may see them.

        Admins get full reviews. Everyone else, including an anonymous
        caller, gets blinded copies.
        """
        reviews = [r for r in self._store.find_all() if r.paper_id == paper_id]
        if viewer is not None and viewer.is_admin:
            return reviews
        return [r.blinded_copy() for r in reviews]

    def get_reviews_by_reviewer(self, reviewer_id: str) -> list[Review]:
        return [r for r in self._store.find_all() if r.reviewer_id == reviewer_id]

    def get_review_by_paper_and_reviewer(self, paper_id: str,
                                         reviewer_id: str) -> Optional[Review]:
        for review in self._store.find_all():
            if review.paper_id == paper_id and review.reviewer_id == reviewer_id:
                return review
        return None

    def get_reviewers_for_paper(self, paper_id: str) -> tuple[str, ...]:
        return self._papers.get_reviewer_ids(paper_id)

    def get_average_paper_rating(self, paper_id: str) -> float:
        """Mean rating for a paper; 0.0 when it has no reviews."""
        ratings = [r.rating for r in self._store.find_all() if r.paper_id == paper_id]
        if not ratings:
            return 0.0
        return sum(ratings) / len(ratings)

    # === Updates ===

    def update_review(self, review: Review) -> Outcome:
        if review.is_blinded:
            return Outcome.forbidden("Blinded reviews cannot be written back")
        if not self._store.update(review):
            return Outcome.not_found(f"Review {review.review_id} not found")
        return Outcome.success(review.review_id)

    def revise_review(self, review_id: str, *, rating: Optional[int] = None,
                      comments: Optional[str] = None,
                      acting_user: Optional[UserBase] = None) -> Outcome:
        """Change rating and/or comments. The reviewer or an admin only."""
        with self._store.locked():
            review = self.find_review_by_id(review_id)
            if review is None:
                return Outcome.not_found(f"Review {review_id} not found")
            if acting_user is not None and not (
                acting_user.is_admin or acting_user.user_id == review.reviewer_id
            ):
                return Outcome.forbidden("Only the reviewer or an admin can revise this review")

            review.revise(rating=rating, comments=comments)
            return self.update_review(review)

    def delete_review(self, review_id: str, acting_user: Optional[UserBase] = None) -> Outcome:
        if acting_user is not None and not acting_user.is_admin:
            return Outcome.forbidden("Only admins can delete reviews")
        if not self._store.delete_by_id(review_id):
            return Outcome.not_found(f"Review {review_id} not found")
        return Outcome.success(review_id)
