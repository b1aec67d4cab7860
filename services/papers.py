"""
Paper lifecycle - submission, reviewer assignment and status changes.

Status flow:
    PENDING --assign reviewer--> IN_PROGRESS --admin decision--> ACCEPTED /
    REJECTED / REVISIONS_REQUIRED

Admins may move a paper to any status from any status; removing the last
reviewer drops it back to PENDING. No status is terminal.
"""

from datetime import datetime
from typing import Callable, Iterable, Optional

from models import Outcome, Paper, ReviewStatus, UserBase, new_id
from repositories import EntityStore
from .users import UserDirectory


def _require_admin(acting_user: Optional[UserBase], action: str) -> Optional[Outcome]:
    """Refusal for a non-admin caller; None when the call may proceed."""
    if acting_user is not None and not acting_user.is_admin:
        return Outcome.forbidden(f"Only admins can {action}")
    return None


class PaperLifecycle:
    """
    Paper CRUD and review workflow on top of a paper store.

    Privileged operations take an optional acting_user; when given, it must
    be an admin. Omitting it is a trusted internal call.
    """

    def __init__(
        self,
        store: EntityStore[Paper],
        users: UserDirectory,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = new_id,
    ):
        self._store = store
        self._users = users
        self._clock = clock
        self._new_id = id_factory

    # === Submission ===

    def submit_paper(self, title: str, abstract_text: str, content: str,
                     author_id: str, keywords: Iterable[str] = ()) -> Outcome:
        """Submit a new paper as PENDING. The author must exist."""
        author = self._users.find_by_id(author_id)
        if author is None:
            return Outcome.not_found(f"Author {author_id} not found")

        paper = Paper(
            paper_id=self._new_id(),
            title=title,
            abstract_text=abstract_text,
            content=content,
            author_id=author.user_id,
            author_name=author.name,
            submission_date=self._clock(),
            keywords=keywords,
        )
        if not self._store.save(paper):
            return Outcome.conflict(f"Paper '{title}' already exists")

        print(f"[Papers] Submitted '{paper.title}' by {author.name}")
        return Outcome.success(paper.paper_id)

    # === Queries ===

    def find_paper_by_id(self, paper_id: str) -> Optional[Paper]:
        return self._store.find_by_id(paper_id)

    def get_all_papers(self) -> list[Paper]:
        return self._store.find_all()

    def get_papers_by_author(self, author_id: str) -> list[Paper]:
        return [p for p in self._store.find_all() if p.author_id == author_id]

    def get_papers_by_status(self, status: ReviewStatus | str) -> list[Paper]:
        status = ReviewStatus.parse(status)
        return [p for p in self._store.find_all() if p.status == status]

    def get_papers_for_reviewer(self, reviewer_id: str) -> list[Paper]:
        """Papers assigned to a reviewer, with the author blinded."""
        return [
            p.blinded_copy()
            for p in self._store.find_all()
            if p.has_reviewer(reviewer_id)
        ]

    def get_reviewer_ids(self, paper_id: str) -> tuple[str, ...]:
        paper = self.find_paper_by_id(paper_id)
        return paper.reviewer_ids if paper else ()

    def search_papers_by_keyword(self, term: str) -> list[Paper]:
        """Case-insensitive substring search across keywords."""
        return [p for p in self._store.find_all() if p.matches_keyword(term)]

    # === Reviewer assignment ===

    def assign_reviewer(self, paper_id: str, reviewer_id: str,
                        acting_user: Optional[UserBase] = None) -> Outcome:
        """
        Assign a reviewer and move the paper to IN_PROGRESS.

        Repeating an assignment succeeds without adding the reviewer twice.
        Authors can never review their own paper.
        """
        refused = _require_admin(acting_user, "assign reviewers")
        if refused:
            return refused

        with self._store.locked():
            paper = self.find_paper_by_id(paper_id)
            if paper is None:
                return Outcome.not_found(f"Paper {paper_id} not found")
            if self._users.find_by_id(reviewer_id) is None:
                return Outcome.not_found(f"Reviewer {reviewer_id} not found")
            if reviewer_id == paper.author_id:
                return Outcome.conflict("Authors cannot review their own paper")

            paper.assign_reviewer(reviewer_id)
            paper.set_status(ReviewStatus.IN_PROGRESS)
            return self.update_paper(paper)

    def remove_reviewer(self, paper_id: str, reviewer_id: str,
                        acting_user: Optional[UserBase] = None) -> Outcome:
        """
        Unassign a reviewer; with none left the paper returns to PENDING.

        Removing someone who is not assigned is NOT_FOUND rather than a
        silent success, and leaves the status alone.
        """
        refused = _require_admin(acting_user, "remove reviewers")
        if refused:
            return refused

        with self._store.locked():
            paper = self.find_paper_by_id(paper_id)
            if paper is None:
                return Outcome.not_found(f"Paper {paper_id} not found")
            if not paper.remove_reviewer(reviewer_id):
                return Outcome.not_found(f"Reviewer {reviewer_id} is not assigned to this paper")

            if not paper.reviewer_ids:
                paper.set_status(ReviewStatus.PENDING)
            return self.update_paper(paper)

    # === Updates ===

    def update_paper_status(self, paper_id: str, status: ReviewStatus | str,
                            acting_user: Optional[UserBase] = None) -> Outcome:
        """Set any status. Raises ValueError for an unknown status name."""
        status = ReviewStatus.parse(status)
        refused = _require_admin(acting_user, "change paper status")
        if refused:
            return refused

        with self._store.locked():
            paper = self.find_paper_by_id(paper_id)
            if paper is None:
                return Outcome.not_found(f"Paper {paper_id} not found")
            paper.set_status(status)
            return self.update_paper(paper)

    def update_paper(self, paper: Paper) -> Outcome:
        if paper.is_blinded:
            return Outcome.forbidden("Blinded papers cannot be written back")
        if not self._store.update(paper):
            return Outcome.not_found(f"Paper {paper.paper_id} not found")
        return Outcome.success(paper.paper_id)

    def edit_paper(self, paper_id: str, *, title: Optional[str] = None,
                   abstract_text: Optional[str] = None, content: Optional[str] = None,
                   keywords: Optional[Iterable[str]] = None,
                   acting_user: Optional[UserBase] = None) -> Outcome:
        """Change title, abstract, content or keywords. Author or admin only."""
        with self._store.locked():
            paper = self.find_paper_by_id(paper_id)
            if paper is None:
                return Outcome.not_found(f"Paper {paper_id} not found")
            if acting_user is not None and not (
                acting_user.is_admin or acting_user.user_id == paper.author_id
            ):
                return Outcome.forbidden("Only the author or an admin can edit this paper")

            if title is not None:
                paper.title = title
            if abstract_text is not None:
                paper.abstract_text = abstract_text
            if content is not None:
                paper.content = content
            if keywords is not None:
                paper.keywords = keywords
            paper.touch()
            return self.update_paper(paper)

    def delete_paper(self, paper_id: str, acting_user: Optional[UserBase] = None) -> Outcome:
        refused = _require_admin(acting_user, "delete papers")
        if refused:
            return refused

        if not self._store.delete_by_id(paper_id):
            return Outcome.not_found(f"Paper {paper_id} not found")
        print(f"[Papers] Deleted {paper_id}")
        return Outcome.success(paper_id)
